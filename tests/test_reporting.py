from __future__ import annotations

import logging

from analysis.reporting import TRAJECTORY_COLUMNS, format_pair_report, format_summary, summarize, trajectories_to_frame
from core.pairing import PairingEngine
from core.records import Charge
from core.trajectory_store import TrajectoryStore
from tests.helpers import pos


def test_pair_report_lists_only_paired_trajectories(paired_store) -> None:
    PairingEngine(paired_store).pair(5, 2)

    report = format_pair_report(paired_store)

    assert report.splitlines() == [
        "1 has: ",
        " spouse: 1",
        " twin: 1",
        "2 has: ",
        " twin: 2",
        "3 has: ",
        " spouse: 3",
    ]


def test_pair_report_is_empty_without_pairs(paired_store) -> None:
    assert format_pair_report(paired_store, Charge.NEGATIVE) == ""


def test_trajectories_frame(paired_store) -> None:
    PairingEngine(paired_store).pair(5, 2)

    df = trajectories_to_frame(paired_store)

    assert list(df.columns) == TRAJECTORY_COLUMNS
    assert len(df) == 7
    first = df.iloc[0]
    assert (first["identity"], first["charge"], first["age"]) == (1, "positive", 5)
    assert df["twin"].isna().sum() == 3
    assert trajectories_to_frame(paired_store, Charge.NEGATIVE)["charge"].unique().tolist() == ["negative"]


def test_summary_of_paired_store(paired_store) -> None:
    PairingEngine(paired_store).pair(5, 2)

    summary = summarize(paired_store, Charge.POSITIVE, tracked_fraction=1.0)

    assert summary["frames"] == 14
    assert summary["positive_trajectories"] == 4
    assert summary["negative_trajectories"] == 3
    assert summary["counts"]["both"] == 1
    assert summary["lifespan_mean"] == 5.5
    assert summary["spouse_is_twin"] == 1.0

    text = format_summary(summary)
    assert "Frames read:            14" in text
    assert "Tracked lines:          100.0%" in text
    assert "  both           1" in text


def test_summary_reports_undefined_statistics_as_none(caplog) -> None:
    store = TrajectoryStore().load([pos(1, 0, 0, 0)])

    with caplog.at_level(logging.WARNING, logger="analysis.reporting"):
        summary = summarize(store, Charge.NEGATIVE)

    assert summary["lifespan_mean"] is None
    assert summary["spouse_is_twin"] is None
    assert "Lifespan statistics unavailable" in caplog.text
    assert "mean n/a, std n/a" in format_summary(summary)
