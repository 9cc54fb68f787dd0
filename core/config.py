"""
Parameters for pairing runs and threshold sweeps.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

import numpy as np

from core.records import Charge

# Recommended thresholds for cell monolayers, from experimental observation
DEFAULT_DISTANCE_THRESHOLD = 40.0
DEFAULT_TIME_THRESHOLD = 4


class EligibilityPolicy(Enum):
    """Which opposite-charge trajectories may be claimed during a pairing pass"""
    ALL = "all"
    AWAY_FROM_EDGES = "away-from-edges"  # births/deaths further than time_threshold from the recording edges


@dataclass
class PairingParams:
    """Parameters for one pairing pass"""
    distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD
    time_threshold: int = DEFAULT_TIME_THRESHOLD
    seeker_charge: Charge = Charge.POSITIVE
    eligibility: EligibilityPolicy = EligibilityPolicy.ALL

    def __post_init__(self):
        """Validate thresholds and accept plain string names from the UI and CLI"""
        if self.distance_threshold < 0:
            raise ValueError(f"distance_threshold must be >= 0, got {self.distance_threshold}")
        if self.time_threshold < 0:
            raise ValueError(f"time_threshold must be >= 0, got {self.time_threshold}")

        self.seeker_charge = Charge.parse(self.seeker_charge)
        if not isinstance(self.eligibility, EligibilityPolicy):
            try:
                self.eligibility = EligibilityPolicy(str(self.eligibility).strip().lower().replace("_", "-"))
            except ValueError:
                choices = [policy.value for policy in EligibilityPolicy]
                raise ValueError(f"Unknown eligibility policy: {self.eligibility!r}. Choose from: {choices}") from None

    @property
    def pool_charge(self) -> Charge:
        return self.seeker_charge.opposite


@dataclass
class SweepGrid:
    """Inclusive threshold ranges for a parameter sweep"""
    time_start: int
    time_stop: int
    time_step: int
    distance_start: float
    distance_stop: float
    distance_step: float

    def __post_init__(self):
        if self.time_step <= 0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
        if self.distance_step <= 0:
            raise ValueError(f"distance_step must be positive, got {self.distance_step}")
        if self.time_stop < self.time_start:
            raise ValueError("time_stop must not be smaller than time_start")
        if self.distance_stop < self.distance_start:
            raise ValueError("distance_stop must not be smaller than distance_start")
        if self.time_start < 0 or self.distance_start < 0:
            raise ValueError("Sweep ranges must start at a non-negative threshold")

    def times(self) -> List[int]:
        return list(range(self.time_start, self.time_stop + 1, self.time_step))

    def distances(self) -> List[float]:
        # start + i * step, not repeated addition
        count = int(np.floor((self.distance_stop - self.distance_start) / self.distance_step + 1e-9)) + 1
        return [round(self.distance_start + i * self.distance_step, 10) for i in range(count)]
