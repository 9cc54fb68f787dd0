"""
Analysis modules for the Defect Pairing toolkit.
"""
from .statistics import mean, variance, standard_deviation
from .queries import (
    PairCategory,
    EXCLUSIVE_CATEGORIES,
    count_by,
    category_counts,
    lifespan_mean,
    lifespan_variance,
    lifespan_std,
    spouse_is_twin_fraction,
    alive_count,
    charge_balance,
    percent_tracked,
    total_charge,
)
from .reporting import format_pair_report, format_summary, summarize, trajectories_to_frame
from .parameter_sweep import sweep_thresholds, format_sweep_chart
