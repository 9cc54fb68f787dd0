from __future__ import annotations

import pytest

from core.errors import InputUnavailableError, MalformedRecordError
from core.records import (
    UNTRACKED,
    Charge,
    FileFormat,
    decode_lines,
    detections_to_frame,
    parse_detections,
    parse_line,
    read_detections,
)
from tests.helpers import make_header, make_line


def test_parse_line_reads_positional_columns() -> None:
    detection = parse_line(make_line(12, 7, 3.5, -1.25, 1))

    assert detection.identity == 12
    assert detection.point.t == 7
    assert detection.point.x == 3.5
    assert detection.point.y == -1.25
    assert detection.charge is Charge.POSITIVE
    assert detection.is_tracked
    assert detection.key == (Charge.POSITIVE, 12)


@pytest.mark.parametrize("value, expected", [("0.5", Charge.POSITIVE), ("0", Charge.NEGATIVE), ("-0.5", Charge.NEGATIVE)])
def test_charge_is_positive_only_for_values_above_zero(value, expected) -> None:
    assert parse_line(make_line(1, 0, 0, 0, value)).charge is expected


def test_empty_track_id_is_untracked() -> None:
    detection = parse_line(make_line(None, 3, 1.0, 1.0, -1))

    assert detection.identity is UNTRACKED
    assert not detection.is_tracked


def test_trailing_padding_is_discarded() -> None:
    detection = parse_line(make_line(4, 2, 1.0, 2.0, -0.5, padding="   \t"))

    assert detection.identity == 4
    assert detection.charge is Charge.NEGATIVE


def test_line_ending_early_is_malformed() -> None:
    truncated = ",".join(["0"] * 20) + "\n"

    with pytest.raises(MalformedRecordError, match="Line 5: Line ended early"):
        parse_line(truncated, line_number=5)


def test_non_numeric_field_is_malformed() -> None:
    line = make_line(1, "frame", 0.0, 0.0, 1)

    with pytest.raises(MalformedRecordError, match="frame"):
        parse_line(line)


def test_custom_layout_and_delimiter() -> None:
    layout = FileFormat(delimiter=";", track_id_column=0, time_column=1, x_column=2, y_column=3, charge_column=4)

    detection = parse_line("9;4;1.0;2.0;-1\n", layout)

    assert layout.min_fields == 5
    assert detection.identity == 9
    assert detection.charge is Charge.NEGATIVE


def test_file_format_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        FileFormat(delimiter="")
    with pytest.raises(ValueError):
        FileFormat(x_column=-1)


def test_parse_detections_skips_header_and_blank_lines() -> None:
    lines = [make_header(), make_line(1, 0, 0, 0, 1), "\n", "   \n", make_line(None, 1, 0, 0, -1)]

    detections = list(parse_detections(lines))

    assert [d.identity for d in detections] == [1, None]


def test_parse_detections_reports_the_file_line_number() -> None:
    lines = [make_header(), make_line(1, 0, 0, 0, 1), "1,2,3\n"]

    with pytest.raises(MalformedRecordError) as excinfo:
        list(parse_detections(lines))

    assert excinfo.value.line_number == 3


def test_read_detections_missing_file(tmp_path) -> None:
    with pytest.raises(InputUnavailableError) as excinfo:
        list(read_detections(tmp_path / "absent.csv"))

    assert isinstance(excinfo.value, FileNotFoundError)
    assert "absent.csv" in str(excinfo.value)


def test_read_detections_reads_file_in_order(write_detections) -> None:
    path = write_detections([(1, 0, 0.0, 0.0, 1), (2, 0, 5.0, 5.0, -1), (1, 1, 1.0, 0.0, 1)])

    detections = list(read_detections(path))

    assert [(d.identity, d.point.t, d.charge) for d in detections] == [
        (1, 0, Charge.POSITIVE),
        (2, 0, Charge.NEGATIVE),
        (1, 1, Charge.POSITIVE),
    ]


def test_detections_to_frame_keeps_untracked_rows() -> None:
    df = detections_to_frame(parse_detections([make_header(), make_line(3, 0, 1, 2, 1), make_line(None, 1, 1, 2, -1)]))

    assert list(df.columns) == ["identity", "charge", "x", "y", "t", "tracked"]
    assert df["identity"].iloc[0] == 3
    assert df["identity"].isna().iloc[1]
    assert df["tracked"].tolist() == [True, False]


def test_charge_parse_aliases() -> None:
    assert Charge.parse("+") is Charge.POSITIVE
    assert Charge.parse("Negative") is Charge.NEGATIVE
    assert Charge.parse(False) is Charge.NEGATIVE
    assert Charge.POSITIVE.opposite is Charge.NEGATIVE
    with pytest.raises(ValueError):
        Charge.parse("neutral")


@pytest.mark.parametrize(
    "identity, t, x, y, charge",
    [
        (1, "nan", 0, 0, 1),
        (1, "inf", 0, 0, 1),
        ("inf", 0, 0, 0, 1),
        ("1e400", 0, 0, 0, 1),
        (1, 0, "nan", 0, 1),
        (1, 0, 0, "-inf", 1),
        (1, 0, 0, 0, "nan"),
    ],
)
def test_non_finite_numbers_are_malformed(identity, t, x, y, charge) -> None:
    with pytest.raises(MalformedRecordError, match="not a finite number"):
        parse_line(make_line(identity, t, x, y, charge), line_number=2)


def test_decode_lines_keeps_line_endings() -> None:
    data = (make_header() + make_line(1, 0, 0, 0, 1)).encode("utf-8")

    lines = decode_lines(data)

    assert len(lines) == 2
    assert [d.identity for d in parse_detections(lines)] == [1]


def test_decode_lines_rejects_non_utf8_bytes() -> None:
    with pytest.raises(MalformedRecordError, match="not UTF-8"):
        decode_lines(b"\xff\xfeheader\n")
