"""
Detection records and the line-oriented reader for tracker exports.

One line of the input file is one detection of one defect in one frame. The
first line is a header. Columns are addressed by position, as in the TrackMate
spreadsheet export the files come from.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

import pandas as pd

from core.errors import InputUnavailableError, MalformedRecordError
from core.spacetime import SpatiotemporalPoint

logger = logging.getLogger(__name__)

# Identity value of a detection that must not be attached to any trajectory
UNTRACKED = None


class Charge(Enum):
    """Sign of a defect. Positive and negative defects live in separate partitions."""
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def opposite(self) -> "Charge":
        return Charge.NEGATIVE if self is Charge.POSITIVE else Charge.POSITIVE

    @property
    def sign(self) -> int:
        return 1 if self is Charge.POSITIVE else -1

    @classmethod
    def from_value(cls, value: float) -> "Charge":
        """Strictly positive values are positive charges, everything else negative."""
        return cls.POSITIVE if value > 0 else cls.NEGATIVE

    @classmethod
    def parse(cls, name) -> "Charge":
        """Accept a Charge, 'positive'/'negative', '+'/'-' or a truthy/falsy flag."""
        if isinstance(name, cls):
            return name
        if isinstance(name, bool):
            return cls.POSITIVE if name else cls.NEGATIVE
        aliases = {
            "positive": cls.POSITIVE, "pos": cls.POSITIVE, "+": cls.POSITIVE,
            "negative": cls.NEGATIVE, "neg": cls.NEGATIVE, "-": cls.NEGATIVE,
        }
        key = str(name).strip().lower()
        if key not in aliases:
            raise ValueError(f"Unknown charge: {name!r}. Use 'positive' or 'negative'.")
        return aliases[key]


@dataclass(frozen=True)
class DetectionRecord:
    """One frame's observation of one defect."""
    point: SpatiotemporalPoint
    identity: Optional[int]  # UNTRACKED when the tracker gave no track id
    charge: Charge

    @property
    def is_tracked(self) -> bool:
        return self.identity is not UNTRACKED

    @property
    def key(self):
        """(charge, identity): identities are only unique within a charge."""
        return self.charge, self.identity


@dataclass
class FileFormat:
    """Layout of a detection file. Column positions are zero-based."""
    delimiter: str = ","
    header_lines: int = 1
    track_id_column: int = 3
    time_column: int = 8
    x_column: int = 21
    y_column: int = 22
    charge_column: int = 28

    def __post_init__(self):
        if not self.delimiter:
            raise ValueError("delimiter must be a non-empty string")
        if self.header_lines < 0:
            raise ValueError(f"header_lines must be >= 0, got {self.header_lines}")
        for name in ("track_id_column", "time_column", "x_column", "y_column", "charge_column"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")

    @property
    def min_fields(self) -> int:
        """Number of fields a line needs for every required column to exist."""
        return 1 + max(self.track_id_column, self.time_column, self.x_column,
                       self.y_column, self.charge_column)


DEFAULT_FORMAT = FileFormat()


def _number(fields, column, name, line_number, line):
    raw = fields[column].strip()
    try:
        value = float(raw)
    except ValueError:
        raise MalformedRecordError(f"Could not read {name} from {raw!r}", line_number, line) from None
    # nan, inf and overflowing literals like 1e400
    if not math.isfinite(value):
        raise MalformedRecordError(f"{name.capitalize()} is not a finite number: {raw!r}", line_number, line)
    return value


def parse_line(line: str, file_format: FileFormat = DEFAULT_FORMAT, line_number=None) -> DetectionRecord:
    """
    Decode one data line into a DetectionRecord.

    Trailing padding after the last field is discarded. An empty track id field
    marks the detection as untracked.

    Raises
    ------
    MalformedRecordError
        If the line has fewer fields than the format requires or a numeric
        field does not parse to a finite number.
    """
    stripped = line.rstrip()
    fields = stripped.split(file_format.delimiter)
    if len(fields) < file_format.min_fields:
        raise MalformedRecordError(
            f"Line ended early: expected at least {file_format.min_fields} fields, found {len(fields)}",
            line_number,
            line,
        )

    raw_id = fields[file_format.track_id_column].strip()
    if raw_id:
        identity = int(_number(fields, file_format.track_id_column, "track id", line_number, line))
    else:
        identity = UNTRACKED

    t = int(_number(fields, file_format.time_column, "frame", line_number, line))
    x = _number(fields, file_format.x_column, "x position", line_number, line)
    y = _number(fields, file_format.y_column, "y position", line_number, line)
    charge = Charge.from_value(_number(fields, file_format.charge_column, "charge", line_number, line))

    return DetectionRecord(SpatiotemporalPoint(x, y, t), identity, charge)


def parse_detections(lines: Iterable[str], file_format: FileFormat = DEFAULT_FORMAT) -> Iterator[DetectionRecord]:
    """
    Decode an iterable of lines, header included. Blank lines are skipped.
    """
    for line_number, line in enumerate(lines, start=1):
        if line_number <= file_format.header_lines:
            continue
        if not line.strip():
            continue
        yield parse_line(line, file_format, line_number)


def decode_lines(data: bytes) -> List[str]:
    """
    Split the raw bytes of an uploaded detection file into lines.

    Raises
    ------
    MalformedRecordError
        If the bytes are not valid UTF-8.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedRecordError(f"File is not UTF-8 text (byte {e.start}: {e.reason})") from None
    return text.splitlines(keepends=True)


def open_detection_file(path):
    """Open a detection file for reading, raising InputUnavailableError on failure."""
    try:
        return open(path, "r", encoding="utf-8", newline="")
    except OSError as e:
        raise InputUnavailableError(path, e.strerror) from e


def read_detections(path, file_format: FileFormat = DEFAULT_FORMAT) -> Iterator[DetectionRecord]:
    """
    Lazily read every detection of a file in line order.

    The file is opened on the first ``next()``; a missing file raises
    InputUnavailableError at that point, before any record is produced.
    """
    with open_detection_file(path) as handle:
        logger.debug(f"Reading detections from {path}")
        yield from parse_detections(handle, file_format)


def detections_to_frame(records: Iterable[DetectionRecord]) -> pd.DataFrame:
    """
    Tabulate detections, one row per record, for pandas based analysis.
    """
    rows = [
        {
            "identity": record.identity,
            "charge": record.charge.value,
            "x": record.point.x,
            "y": record.point.y,
            "t": record.point.t,
            "tracked": record.is_tracked,
        }
        for record in records
    ]
    columns = ["identity", "charge", "x", "y", "t", "tracked"]
    df = pd.DataFrame(rows, columns=columns)
    # Keep identities integral even when untracked rows introduce missing values
    df["identity"] = df["identity"].astype("Int64")
    return df
