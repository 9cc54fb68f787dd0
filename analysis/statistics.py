"""Population statistics over plain numbers or keyed items, backed by numpy."""

import numpy as np

from core.errors import EmptyAggregateError


def _values(items, key=None):
    if key is not None:
        items = (key(item) for item in items)
    values = np.fromiter((float(v) for v in items), dtype=float)
    if values.size == 0:
        raise EmptyAggregateError("Cannot aggregate an empty sequence")
    return values


def mean(items, key=None) -> float:
    """
    Arithmetic mean of a sequence of numbers, or of ``key(item)`` for each item.

    Raises EmptyAggregateError when there is nothing to average.
    """
    return float(np.mean(_values(items, key)))


def variance(items, key=None) -> float:
    """Population variance (mean squared deviation), same conventions as ``mean``."""
    return float(np.var(_values(items, key)))


def standard_deviation(items, key=None) -> float:
    return float(np.sqrt(variance(items, key)))
