"""
Points in the plane plus a frame index, and the proximity model used for pairing.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SpatiotemporalPoint:
    """A planar position observed at an integer frame."""
    x: float
    y: float
    t: int

    def planar_distance(self, other: "SpatiotemporalPoint") -> float:
        """Euclidean distance in the plane, ignoring time."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def time_difference(self, other: "SpatiotemporalPoint") -> int:
        return abs(self.t - other.t)

    def spacetime_distance(self, other: "SpatiotemporalPoint") -> float:
        """
        Planar distance plus the absolute frame difference.

        Only used to rank candidates that already passed ``near``; it is not a
        metric on space-time.
        """
        return self.planar_distance(other) + self.time_difference(other)

    def near(self, other: "SpatiotemporalPoint", distance_threshold: float, time_threshold: float) -> bool:
        """
        True when ``other`` lies in the cylinder around this point: planar
        distance at most ``distance_threshold`` and frame difference at most
        ``time_threshold``.
        """
        return (
            self.planar_distance(other) <= distance_threshold
            and self.time_difference(other) <= time_threshold
        )

    def __str__(self):
        return f"({self.x:g}, {self.y:g}, t={self.t})"
