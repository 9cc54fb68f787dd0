"""
Exceptions raised by the defect pairing engine.

Input and aggregate failures are hard errors. A pairing search that finds no
candidate is not an error and never raises.
"""


class DefectPairingError(Exception):
    """Base class for all errors raised by this package."""


class InputUnavailableError(DefectPairingError, FileNotFoundError):
    """The detection file could not be opened."""

    def __init__(self, path, reason=None):
        self.path = str(path)
        self.reason = reason
        message = f"Unable to open detection file: {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class MalformedRecordError(DefectPairingError, ValueError):
    """A line ended before every required field was read, or a field did not parse."""

    def __init__(self, message, line_number=None, line=None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class TimeOrderError(DefectPairingError, ValueError):
    """A record would move a trajectory back in time."""


class EmptyAggregateError(DefectPairingError, ValueError):
    """A statistic was requested over an empty set of trajectories."""
