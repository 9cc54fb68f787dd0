"""
Core trajectory assembly and birth/death pairing for the Defect Pairing toolkit.
"""
from .spacetime import SpatiotemporalPoint
from .records import (
    Charge,
    DetectionRecord,
    FileFormat,
    DEFAULT_FORMAT,
    UNTRACKED,
    parse_line,
    parse_detections,
    decode_lines,
    read_detections,
    detections_to_frame,
)
from .config import (
    PairingParams,
    SweepGrid,
    EligibilityPolicy,
    DEFAULT_DISTANCE_THRESHOLD,
    DEFAULT_TIME_THRESHOLD,
)
from .trajectory_store import Relationship, Trajectory, TrajectoryStore
from .pairing import PairingEngine, PairingSummary
from .file_writer import write_tracked_only
from .errors import (
    DefectPairingError,
    InputUnavailableError,
    MalformedRecordError,
    TimeOrderError,
    EmptyAggregateError,
)
