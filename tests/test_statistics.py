from __future__ import annotations

import pytest

from analysis.statistics import mean, standard_deviation, variance
from core.errors import EmptyAggregateError


def test_mean_and_population_variance() -> None:
    values = [2, 4, 4, 4, 5, 5, 7, 9]

    assert mean(values) == 5.0
    assert variance(values) == 4.0
    assert standard_deviation(values) == 2.0


def test_key_extracts_values() -> None:
    items = [{"age": 1}, {"age": 3}]

    assert mean(items, key=lambda item: item["age"]) == 2.0
    assert variance(items, key=lambda item: item["age"]) == 1.0


def test_single_value_has_zero_variance() -> None:
    assert variance([7]) == 0.0


@pytest.mark.parametrize("aggregate", [mean, variance, standard_deviation])
def test_empty_input_raises(aggregate) -> None:
    with pytest.raises(EmptyAggregateError):
        aggregate([])


def test_generators_are_accepted() -> None:
    assert mean(x for x in range(5)) == 2.0
