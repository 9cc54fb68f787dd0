"""
Twin (birth) and spouse (death) pairing between opposite-charge trajectories.

Pairing is greedy: seekers are visited in the store's order and each one takes
the closest still-unclaimed candidate inside the threshold cylinder. A seeker
visited early can take a candidate that a later seeker would have matched more
closely; the result is not a globally optimal assignment.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from core.config import EligibilityPolicy, PairingParams
from core.trajectory_store import Relationship, Trajectory, TrajectoryStore

logger = logging.getLogger(__name__)


@dataclass
class PairingSummary:
    """Outcome of one pairing pass"""
    params: PairingParams
    seekers: int
    eligible_births: int
    eligible_deaths: int
    twins: int
    spouses: int


class PairingEngine:
    """
    Links twins and spouses between the two partitions of a TrajectoryStore.
    """

    def __init__(self, store: TrajectoryStore, params: Optional[PairingParams] = None):
        self.store = store
        self.params = params if params is not None else PairingParams()

    def reset_pairs(self):
        """Set every trajectory's twin and spouse to none. Nothing else changes."""
        self.store.clear_links()

    def eligible_pool(self, relationship: Relationship, params: Optional[PairingParams] = None) -> List[Trajectory]:
        """
        Candidates from the pool partition for one relationship, in ascending
        identity order.

        With ``EligibilityPolicy.AWAY_FROM_EDGES`` births must come after the
        first ``time_threshold`` frames and deaths must come more than
        ``time_threshold`` frames before the end of the recording, so defects
        already present at the start or still alive at the end are not paired.
        """
        params = params if params is not None else self.params
        candidates = sorted(self.store.partition(params.pool_charge), key=lambda trajectory: trajectory.identity)

        if params.eligibility is EligibilityPolicy.ALL:
            return candidates

        end = self.store.frame_count
        if relationship is Relationship.TWIN:
            return [c for c in candidates if c.birth.t > params.time_threshold]
        return [c for c in candidates if end - c.current.t > params.time_threshold]

    def pair(self, distance_threshold: Optional[float] = None, time_threshold: Optional[int] = None) -> PairingSummary:
        """
        Recompute every twin and spouse link.

        Parameters
        ----------
        distance_threshold : float, optional
            Maximum planar distance between paired births (or deaths). Defaults
            to ``self.params.distance_threshold``.
        time_threshold : int, optional
            Maximum frame difference between paired births (or deaths).
            Defaults to ``self.params.time_threshold``.

        Returns
        -------
        PairingSummary
            Counts of seekers, eligible candidates and links made.
        """
        # === STEP 1: Resolve parameters and clear stale links ===
        params = self.params
        if distance_threshold is not None or time_threshold is not None:
            params = replace(
                params,
                distance_threshold=params.distance_threshold if distance_threshold is None else distance_threshold,
                time_threshold=params.time_threshold if time_threshold is None else time_threshold,
            )
        self.reset_pairs()

        # === STEP 2: Build the eligible pools once per pass ===
        births = self.eligible_pool(Relationship.TWIN, params)
        deaths = self.eligible_pool(Relationship.SPOUSE, params)
        seekers = self.store.partition(params.seeker_charge)
        summary = PairingSummary(params, len(seekers), len(births), len(deaths), 0, 0)

        if not seekers:
            logger.warning(f"No {params.seeker_charge.value} trajectories to pair")
            return summary

        logger.debug(
            f"Pairing {len(seekers)} {params.seeker_charge.value} seekers against "
            f"{len(births)} eligible births and {len(deaths)} eligible deaths"
        )

        # === STEP 3: Greedy nearest-candidate search per seeker ===
        for seeker in seekers:
            twin = self._claim(seeker, births, Relationship.TWIN, params)
            if twin is not None:
                self.store.link(seeker.handle, twin.handle, Relationship.TWIN)
                summary.twins += 1

            spouse = self._claim(seeker, deaths, Relationship.SPOUSE, params)
            if spouse is not None:
                self.store.link(seeker.handle, spouse.handle, Relationship.SPOUSE)
                summary.spouses += 1

        logger.info(
            f"Paired {summary.twins} twins and {summary.spouses} spouses among {summary.seekers} seekers "
            f"(distance <= {params.distance_threshold}, time <= {params.time_threshold})"
        )
        return summary

    @staticmethod
    def _claim(seeker: Trajectory, pool: List[Trajectory], relationship: Relationship,
               params: PairingParams) -> Optional[Trajectory]:
        """
        Remove and return the pool member closest to the seeker, or None.

        Only candidates inside the threshold cylinder count. The first
        candidate in pool order wins a tie.
        """
        origin = seeker.snapshot(relationship)
        best_index = None
        best_distance = None

        for index, candidate in enumerate(pool):
            point = candidate.snapshot(relationship)
            if not origin.near(point, params.distance_threshold, params.time_threshold):
                continue
            distance = origin.spacetime_distance(point)
            if best_distance is None or distance < best_distance:
                best_index = index
                best_distance = distance

        if best_index is None:
            return None
        return pool.pop(best_index)
