"""
Trajectories assembled from an ordered stream of detections.

The store owns every trajectory. Trajectories are kept in one list and referred
to by their position in it (a handle); each charge partition maps identities to
handles in first-appearance order.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from core.errors import TimeOrderError
from core.records import Charge, DetectionRecord
from core.spacetime import SpatiotemporalPoint

logger = logging.getLogger(__name__)


class Relationship(Enum):
    """The two kinds of link between opposite-charge trajectories"""
    TWIN = "twin"  # created together
    SPOUSE = "spouse"  # annihilated together


@dataclass
class Trajectory:
    """The tracked life of one defect, from birth to last observation"""
    handle: int
    identity: int
    charge: Charge
    birth: SpatiotemporalPoint
    current: SpatiotemporalPoint
    twin: Optional[int] = None  # identity in the opposite partition
    spouse: Optional[int] = None
    missed_frames: int = 0

    @property
    def age(self) -> int:
        return self.current.t - self.birth.t

    @property
    def has_twin(self) -> bool:
        return self.twin is not None

    @property
    def has_spouse(self) -> bool:
        return self.spouse is not None

    @property
    def spouse_is_twin(self) -> bool:
        return self.has_twin and self.twin == self.spouse

    def snapshot(self, relationship: Relationship) -> SpatiotemporalPoint:
        """Birth point for twin searches, last-seen point for spouse searches."""
        return self.birth if relationship is Relationship.TWIN else self.current

    def partner(self, relationship: Relationship) -> Optional[int]:
        return self.twin if relationship is Relationship.TWIN else self.spouse

    def alive_at(self, t: int) -> bool:
        return self.birth.t <= t <= self.current.t

    def _set_partner(self, relationship: Relationship, identity: Optional[int]):
        if relationship is Relationship.TWIN:
            self.twin = identity
        else:
            self.spouse = identity


class TrajectoryView:
    """
    A lazy, restartable selection of trajectories.

    Every ``iter()`` walks the store again, so a view reflects the store's
    state at iteration time.
    """

    def __init__(self, store: "TrajectoryStore", charges, predicate: Optional[Callable[[Trajectory], bool]] = None):
        self._store = store
        self._charges = tuple(charges)
        self._predicate = predicate

    def __iter__(self) -> Iterator[Trajectory]:
        for charge in self._charges:
            for trajectory in self._store.partition(charge):
                if self._predicate is None or self._predicate(trajectory):
                    yield trajectory

    def count(self) -> int:
        return sum(1 for _ in self)

    def filter(self, predicate: Callable[[Trajectory], bool]) -> "TrajectoryView":
        """Narrow this view with another predicate."""
        if self._predicate is None:
            combined = predicate
        else:
            outer = self._predicate
            combined = lambda trajectory: outer(trajectory) and predicate(trajectory)  # noqa: E731
        return TrajectoryView(self._store, self._charges, combined)


class TrajectoryStore:
    """
    Builds and owns the positive and negative trajectories of one recording.

    ``frame_count`` counts every record consumed by the last ``load``, tracked
    or not.
    """

    def __init__(self):
        self._trajectories: List[Trajectory] = []
        self._partitions: Dict[Charge, Dict[int, int]] = {Charge.POSITIVE: {}, Charge.NEGATIVE: {}}
        self.frame_count = 0

    # === Loading ===

    def load(self, records: Iterable[DetectionRecord]) -> "TrajectoryStore":
        """
        Replace the store's contents with the trajectories found in ``records``.

        Records are consumed in order. Untracked records only advance the frame
        count. A tracked record either starts a trajectory for its
        (charge, identity) or moves that trajectory's current point forward,
        adding any skipped frames to ``missed_frames``.

        The load is atomic: if the stream raises (unreadable file, malformed
        line, a record going back in time) the store keeps its previous state.
        """
        trajectories: List[Trajectory] = []
        partitions: Dict[Charge, Dict[int, int]] = {Charge.POSITIVE: {}, Charge.NEGATIVE: {}}
        frame_count = 0
        gaps = 0

        for record in records:
            frame_count += 1
            if not record.is_tracked:
                continue

            partition = partitions[record.charge]
            handle = partition.get(record.identity)
            if handle is None:
                handle = len(trajectories)
                trajectories.append(
                    Trajectory(
                        handle=handle,
                        identity=record.identity,
                        charge=record.charge,
                        birth=record.point,
                        current=record.point,
                    )
                )
                partition[record.identity] = handle
                continue

            trajectory = trajectories[handle]
            step = record.point.t - trajectory.current.t
            if step < 0:
                raise TimeOrderError(
                    f"{record.charge.value} defect {record.identity} observed at frame {record.point.t} "
                    f"after frame {trajectory.current.t}"
                )
            if step > 1:
                trajectory.missed_frames += step - 1
                gaps += 1
            trajectory.current = record.point

        self._trajectories = trajectories
        self._partitions = partitions
        self.frame_count = frame_count

        logger.info(
            f"Loaded {len(partitions[Charge.POSITIVE])} positive and {len(partitions[Charge.NEGATIVE])} "
            f"negative trajectories from {frame_count} records"
        )
        if gaps:
            logger.debug(f"{gaps} tracking gaps filled across trajectories")
        if frame_count and not trajectories:
            logger.warning("No tracked detections found; every record was untracked")
        return self

    def clear(self):
        """Drop every trajectory and link. Safe to call repeatedly."""
        self._trajectories = []
        self._partitions = {Charge.POSITIVE: {}, Charge.NEGATIVE: {}}
        self.frame_count = 0

    # === Access ===

    def __len__(self):
        return len(self._trajectories)

    def is_empty(self) -> bool:
        return not self._trajectories

    def size(self, charge: Charge) -> int:
        return len(self._partitions[charge])

    def partition(self, charge: Charge) -> List[Trajectory]:
        """Trajectories of one charge in first-appearance order."""
        return [self._trajectories[handle] for handle in self._partitions[charge].values()]

    def iterate(self, charge: Optional[Charge] = None,
                predicate: Optional[Callable[[Trajectory], bool]] = None) -> TrajectoryView:
        """All trajectories (positives first), or one partition, optionally filtered."""
        charges = (charge,) if charge is not None else (Charge.POSITIVE, Charge.NEGATIVE)
        return TrajectoryView(self, charges, predicate)

    def __iter__(self):
        return iter(self.iterate())

    def trajectory(self, handle: int) -> Trajectory:
        return self._trajectories[handle]

    def get(self, charge: Charge, identity: int) -> Trajectory:
        """
        Raises
        ------
        KeyError
            If no trajectory of that charge has that identity.
        """
        try:
            return self._trajectories[self._partitions[charge][identity]]
        except KeyError:
            raise KeyError(f"No {charge.value} trajectory with identity {identity}") from None

    def partner_of(self, trajectory: Trajectory, relationship: Relationship) -> Optional[Trajectory]:
        identity = trajectory.partner(relationship)
        if identity is None:
            return None
        return self.get(trajectory.charge.opposite, identity)

    # === Links ===

    def link(self, handle_a: int, handle_b: int, relationship: Relationship):
        """
        Make two opposite-charge trajectories partners, on both sides at once.

        Any previous partner of either side is released first so no one-sided
        reference survives.
        """
        first = self._trajectories[handle_a]
        second = self._trajectories[handle_b]
        if first.charge is second.charge:
            raise ValueError(
                f"Cannot link two {first.charge.value} defects ({first.identity} and {second.identity})"
            )
        for trajectory in (first, second):
            previous = self.partner_of(trajectory, relationship)
            if previous is not None:
                previous._set_partner(relationship, None)
        first._set_partner(relationship, second.identity)
        second._set_partner(relationship, first.identity)

    def unlink(self, handle: int, relationship: Relationship):
        """Remove one link from both of its ends."""
        trajectory = self._trajectories[handle]
        partner = self.partner_of(trajectory, relationship)
        if partner is not None:
            partner._set_partner(relationship, None)
        trajectory._set_partner(relationship, None)

    def clear_links(self):
        for trajectory in self._trajectories:
            trajectory.twin = None
            trajectory.spouse = None
