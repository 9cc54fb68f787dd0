from __future__ import annotations

import pandas as pd
import pytest

from analysis.parameter_sweep import sweep_thresholds
from core.config import SweepGrid
from core.pairing import PairingEngine
from core.trajectory_store import Relationship
from visualization import create_pairing_plot, create_sweep_heatmap


def test_pairing_plot_draws_each_link_once(paired_store) -> None:
    PairingEngine(paired_store).pair(5, 2)

    fig = create_pairing_plot(paired_store, Relationship.TWIN)

    assert len(fig.data) == 3
    positives, negatives, links = fig.data
    assert len(positives.x) == 4
    assert len(negatives.x) == 3
    # two twin pairs, three entries each
    assert len(links.x) == 6
    assert list(links.x).count(None) == 2


def test_spouse_plot_uses_last_seen_points(paired_store) -> None:
    PairingEngine(paired_store).pair(5, 2)

    fig = create_pairing_plot(paired_store, Relationship.SPOUSE)

    assert list(fig.data[0].x) == [10.0, 100.0, 250.0, 500.0]
    assert "Death" in fig.layout.title.text


def test_sweep_heatmap(paired_store) -> None:
    table = sweep_thresholds(PairingEngine(paired_store), SweepGrid(0, 1, 1, 1.0, 5.0, 2.0))

    fig = create_sweep_heatmap(table, "both")

    heatmap = fig.data[0]
    assert list(heatmap.x) == ["1", "3", "5"]
    assert list(heatmap.y) == ["0", "1"]
    assert heatmap.zmax == 1


def test_empty_sweep_table_is_rejected() -> None:
    with pytest.raises(ValueError, match="empty"):
        create_sweep_heatmap(pd.DataFrame())
