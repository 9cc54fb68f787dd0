"""
Text and tabular reports of trajectories and their pairs.
"""

import logging
from typing import Dict, Optional

import pandas as pd

from analysis.queries import category_counts, lifespan_mean, lifespan_std, spouse_is_twin_fraction
from core.errors import EmptyAggregateError
from core.records import Charge
from core.trajectory_store import TrajectoryStore

logger = logging.getLogger(__name__)

TRAJECTORY_COLUMNS = [
    "identity", "charge",
    "birth_x", "birth_y", "birth_t",
    "last_x", "last_y", "last_t",
    "age", "missed_frames", "twin", "spouse",
]


def format_pair_report(store: TrajectoryStore, charge: Charge = Charge.POSITIVE) -> str:
    """
    List every paired trajectory of one partition with its spouse and twin.

    Example
    -------
    ::

        7 has:
         spouse: 3
         twin: 5
    """
    lines = []
    for trajectory in store.iterate(charge):
        if not (trajectory.has_spouse or trajectory.has_twin):
            continue
        lines.append(f"{trajectory.identity} has: ")
        if trajectory.has_spouse:
            lines.append(f" spouse: {trajectory.spouse}")
        if trajectory.has_twin:
            lines.append(f" twin: {trajectory.twin}")
    return "\n".join(lines) + ("\n" if lines else "")


def trajectories_to_frame(store: TrajectoryStore, charge: Optional[Charge] = None) -> pd.DataFrame:
    """One row per trajectory with birth, last-seen point and links."""
    rows = [
        {
            "identity": t.identity,
            "charge": t.charge.value,
            "birth_x": t.birth.x,
            "birth_y": t.birth.y,
            "birth_t": t.birth.t,
            "last_x": t.current.x,
            "last_y": t.current.y,
            "last_t": t.current.t,
            "age": t.age,
            "missed_frames": t.missed_frames,
            "twin": t.twin,
            "spouse": t.spouse,
        }
        for t in store.iterate(charge)
    ]
    df = pd.DataFrame(rows, columns=TRAJECTORY_COLUMNS)
    df["twin"] = df["twin"].astype("Int64")
    df["spouse"] = df["spouse"].astype("Int64")
    return df


def summarize(store: TrajectoryStore, charge: Charge = Charge.POSITIVE, tracked_fraction: Optional[float] = None) -> Dict:
    """
    Headline numbers for a pairing run.

    Statistics that are undefined for the data at hand (empty partitions, no
    trajectory with both partners) are reported as None.
    """
    summary = {
        "charge": charge.value,
        "frames": store.frame_count,
        "positive_trajectories": store.size(Charge.POSITIVE),
        "negative_trajectories": store.size(Charge.NEGATIVE),
        "counts": category_counts(store, charge),
        "tracked_fraction": tracked_fraction,
    }

    try:
        summary["lifespan_mean"] = lifespan_mean(store, charge)
        summary["lifespan_std"] = lifespan_std(store, charge)
    except EmptyAggregateError as e:
        logger.warning(f"Lifespan statistics unavailable: {e}")
        summary["lifespan_mean"] = None
        summary["lifespan_std"] = None

    try:
        summary["spouse_is_twin"] = spouse_is_twin_fraction(store, charge)
    except EmptyAggregateError:
        summary["spouse_is_twin"] = None

    return summary


def format_summary(summary: Dict) -> str:
    def _fmt(value, pattern):
        return "n/a" if value is None else pattern.format(value)

    lines = [
        f"Frames read:            {summary['frames']}",
        f"Positive trajectories:  {summary['positive_trajectories']}",
        f"Negative trajectories:  {summary['negative_trajectories']}",
        f"Tracked lines:          {_fmt(summary.get('tracked_fraction'), '{:.1%}')}",
        f"Lifespan ({summary['charge']}): mean {_fmt(summary['lifespan_mean'], '{:.2f}')}, "
        f"std {_fmt(summary['lifespan_std'], '{:.2f}')}",
        f"Spouse is twin:         {_fmt(summary['spouse_is_twin'], '{:.1%}')}",
        f"Counts ({summary['charge']}):",
    ]
    for name, count in summary["counts"].items():
        lines.append(f"  {name:<15}{count}")
    return "\n".join(lines) + "\n"
