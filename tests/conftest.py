from __future__ import annotations

import pytest

from core.records import DEFAULT_FORMAT, FileFormat
from core.trajectory_store import TrajectoryStore
from tests.helpers import make_header, make_line, neg, pos


@pytest.fixture
def write_detections(tmp_path):
    """Write (identity, t, x, y, charge) rows to a detection file and return its path."""

    def _write(rows, name="detections.csv", file_format: FileFormat = DEFAULT_FORMAT, extra_lines=()):
        path = tmp_path / name
        lines = [make_header(file_format)]
        lines.extend(make_line(*row, file_format=file_format) for row in rows)
        lines.extend(extra_lines)
        path.write_text("".join(lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def twin_scenario_store() -> TrajectoryStore:
    """Positive 1 and negative 1 born next to each other, positive 2 far away."""
    return TrajectoryStore().load(
        [
            pos(1, 0, 0.0, 0.0),
            neg(1, 0, 1.0, 0.0),
            pos(2, 0, 50.0, 50.0),
        ]
    )


@pytest.fixture
def paired_store() -> TrajectoryStore:
    """
    Four positives and three negatives over ten frames.

    p1/n1 are born together and die together, p2/n2 are born together but die
    apart, p3/n3 die together but are born apart, p4 is alone.
    """
    records = [
        pos(1, 0, 0.0, 0.0), neg(1, 0, 2.0, 0.0),
        pos(2, 1, 100.0, 0.0), neg(2, 1, 103.0, 0.0),
        pos(3, 2, 200.0, 0.0), neg(3, 2, 300.0, 0.0),
        pos(4, 3, 500.0, 500.0),
        pos(1, 5, 10.0, 10.0), neg(1, 5, 11.0, 10.0),
        pos(2, 6, 100.0, 0.0), neg(2, 9, 180.0, 90.0),
        pos(3, 8, 250.0, 50.0), neg(3, 8, 252.0, 50.0),
        pos(4, 9, 500.0, 500.0),
    ]
    return TrajectoryStore().load(records)
