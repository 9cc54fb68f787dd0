from __future__ import annotations

from core.records import DEFAULT_FORMAT, Charge, DetectionRecord, FileFormat
from core.spacetime import SpatiotemporalPoint


def make_line(identity, t, x, y, charge, file_format: FileFormat = DEFAULT_FORMAT, padding: str = "") -> str:
    """A detection line with every other column filled with zeros."""
    fields = ["0"] * file_format.min_fields
    fields[file_format.track_id_column] = "" if identity is None else str(identity)
    fields[file_format.time_column] = str(t)
    fields[file_format.x_column] = str(x)
    fields[file_format.y_column] = str(y)
    fields[file_format.charge_column] = str(charge)
    return file_format.delimiter.join(fields) + padding + "\n"


def make_header(file_format: FileFormat = DEFAULT_FORMAT) -> str:
    return file_format.delimiter.join(f"col{i}" for i in range(file_format.min_fields)) + "\n"


def record(identity, t, x, y, charge=Charge.POSITIVE) -> DetectionRecord:
    return DetectionRecord(SpatiotemporalPoint(x, y, t), identity, charge)


def pos(identity, t, x, y) -> DetectionRecord:
    return record(identity, t, x, y, Charge.POSITIVE)


def neg(identity, t, x, y) -> DetectionRecord:
    return record(identity, t, x, y, Charge.NEGATIVE)
