"""
Re-run pairing over a grid of distance and time thresholds.
"""

import logging
from typing import Callable, Optional, Union

import pandas as pd

from analysis.queries import PairCategory, count_by
from core.config import SweepGrid
from core.pairing import PairingEngine

logger = logging.getLogger(__name__)

Metric = Union[str, PairCategory, Callable[[PairingEngine], float]]


def _metric_function(metric: Metric) -> Callable[[PairingEngine], float]:
    if callable(metric):
        return metric
    category = PairCategory.parse(metric)
    return lambda e: count_by(e.store, category, e.params.seeker_charge)


def sweep_thresholds(engine: PairingEngine, grid: SweepGrid, metric: Metric = PairCategory.BOTH) -> pd.DataFrame:
    """
    Pair once per (time, distance) cell and record a metric.

    Parameters
    ----------
    engine : PairingEngine
        Engine over an already loaded store. Its links are left in the state of
        the last cell.
    grid : SweepGrid
        Inclusive threshold ranges.
    metric : str, PairCategory or callable
        A category counted over the seeker partition, or any function of the
        engine evaluated after pairing.

    Returns
    -------
    pandas.DataFrame
        Rows indexed by time threshold, columns by distance threshold.
    """
    measure = _metric_function(metric)
    times = grid.times()
    distances = grid.distances()

    logger.info(f"Sweeping {len(times)} time x {len(distances)} distance thresholds")

    table = pd.DataFrame(index=pd.Index(times, name="time"), columns=pd.Index(distances, name="distance"), dtype=float)
    for t in times:
        for d in distances:
            engine.pair(d, t)
            table.loc[t, d] = measure(engine)
    return table


def format_sweep_chart(table: pd.DataFrame, value_format: Optional[str] = None) -> str:
    """
    Tab separated chart, time thresholds down the side and distances across.
    """
    def _cell(value):
        if value_format:
            return value_format.format(value)
        return str(int(value)) if float(value).is_integer() else f"{value:g}"

    header = "Time\\Dist\t" + "\t".join(f"{d:g}" for d in table.columns)
    rows = [header]
    for t, row in table.iterrows():
        rows.append(f"{t}\t" + "\t".join(_cell(v) for v in row.values))
    return "\n".join(rows) + "\n"
