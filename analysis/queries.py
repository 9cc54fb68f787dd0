"""
Read-only aggregates over a TrajectoryStore and its current pairing state.
"""

from enum import Enum
from typing import Dict, Iterable, Optional

from analysis.statistics import mean, standard_deviation, variance
from core.errors import EmptyAggregateError
from core.records import Charge, DetectionRecord
from core.trajectory_store import Trajectory, TrajectoryStore


class PairCategory(Enum):
    """Relationship categories a trajectory can be counted under"""
    SPOUSE_ONLY = "spouse-only"
    TWIN_ONLY = "twin-only"
    BOTH = "both"
    NEITHER = "neither"
    ALL = "all"
    HAS_SPOUSE = "has-spouse"  # spouse-only + both
    HAS_TWIN = "has-twin"  # twin-only + both
    SPOUSE_IS_TWIN = "spouse-is-twin"

    @classmethod
    def parse(cls, name) -> "PairCategory":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower().replace("_", "-"))
        except ValueError:
            raise ValueError(f"Unknown category: {name!r}. Choose from: {[c.value for c in cls]}") from None


# Categories that split a partition without overlap
EXCLUSIVE_CATEGORIES = (PairCategory.SPOUSE_ONLY, PairCategory.TWIN_ONLY, PairCategory.BOTH, PairCategory.NEITHER)

_PREDICATES = {
    PairCategory.SPOUSE_ONLY: lambda t: t.has_spouse and not t.has_twin,
    PairCategory.TWIN_ONLY: lambda t: t.has_twin and not t.has_spouse,
    PairCategory.BOTH: lambda t: t.has_twin and t.has_spouse,
    PairCategory.NEITHER: lambda t: not t.has_twin and not t.has_spouse,
    PairCategory.ALL: lambda t: True,
    PairCategory.HAS_SPOUSE: lambda t: t.has_spouse,
    PairCategory.HAS_TWIN: lambda t: t.has_twin,
    PairCategory.SPOUSE_IS_TWIN: lambda t: t.spouse_is_twin,
}


def matches_category(trajectory: Trajectory, category) -> bool:
    return _PREDICATES[PairCategory.parse(category)](trajectory)


def count_by(store: TrajectoryStore, category, charge: Optional[Charge] = Charge.POSITIVE) -> int:
    """
    Number of trajectories in a partition (both when ``charge`` is None)
    falling under ``category`` in the current pairing state.
    """
    return store.iterate(charge, _PREDICATES[PairCategory.parse(category)]).count()


def category_counts(store: TrajectoryStore, charge: Optional[Charge] = Charge.POSITIVE) -> Dict[str, int]:
    """Counts for every category, keyed by category name."""
    return {category.value: count_by(store, category, charge) for category in PairCategory}


def _ages(store: TrajectoryStore, charge: Optional[Charge]):
    trajectories = list(store.iterate(charge))
    if not trajectories:
        scope = f"{charge.value} " if charge is not None else ""
        raise EmptyAggregateError(f"No {scope}trajectories to compute a lifespan over")
    return trajectories


def lifespan_mean(store: TrajectoryStore, charge: Optional[Charge] = None) -> float:
    """Mean of ``current.t - birth.t``. Raises EmptyAggregateError on an empty partition."""
    return mean(_ages(store, charge), key=lambda t: t.age)


def lifespan_variance(store: TrajectoryStore, charge: Optional[Charge] = None) -> float:
    """Population variance of lifespans. Raises EmptyAggregateError on an empty partition."""
    return variance(_ages(store, charge), key=lambda t: t.age)


def lifespan_std(store: TrajectoryStore, charge: Optional[Charge] = None) -> float:
    return standard_deviation(_ages(store, charge), key=lambda t: t.age)


def spouse_is_twin_fraction(store: TrajectoryStore, charge: Charge = Charge.POSITIVE) -> float:
    """
    Share of trajectories with both partners whose spouse is also their twin.
    """
    both = count_by(store, PairCategory.BOTH, charge)
    if both == 0:
        raise EmptyAggregateError(f"No {charge.value} trajectories have both a twin and a spouse")
    return count_by(store, PairCategory.SPOUSE_IS_TWIN, charge) / both


def alive_count(store: TrajectoryStore, t: int, charge: Optional[Charge] = None) -> int:
    """Trajectories whose lifetime covers frame ``t``."""
    return store.iterate(charge, lambda trajectory: trajectory.alive_at(t)).count()


def charge_balance(store: TrajectoryStore, t: int) -> int:
    """Positive minus negative defects alive at frame ``t``."""
    return alive_count(store, t, Charge.POSITIVE) - alive_count(store, t, Charge.NEGATIVE)


def percent_tracked(records: Iterable[DetectionRecord]) -> float:
    """Fraction of records that carry a track identity."""
    tracked = total = 0
    for record in records:
        total += 1
        if record.is_tracked:
            tracked += 1
    if total == 0:
        raise EmptyAggregateError("No records to compute a tracked fraction over")
    return tracked / total


def total_charge(records: Iterable[DetectionRecord]) -> int:
    """Sum of the signs of every tracked record."""
    return sum(record.charge.sign for record in records if record.is_tracked)
