"""Error taxonomy for sink initialization.

Every failure on the initialization path is fatal for the process:
    DirectoryCreationError  - log directory missing and uncreatable
    SequenceExhaustedError  - 9999 files already exist for today
    FileOpenError           - log file handle could not be obtained

All three derive from SinkError so callers can catch them together.
Steady-state write failures are not wrapped; they surface as the
underlying OSError/ValueError from the file object.
"""

from __future__ import annotations

from pathlib import Path


class SinkError(Exception):
    """Base class for fatal sink initialization errors."""

    def __init__(self, message: str, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class DirectoryCreationError(SinkError):
    """Log directory is not a directory or could not be created."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Could not create log directory {str(path)!r}: {reason}", path)
        self.reason = reason


class SequenceExhaustedError(SinkError):
    """No sequence id left for today's date stamp."""

    def __init__(self, path: Path | str, date_stamp: str, max_id: int) -> None:
        super().__init__(
            f"Log sequence exhausted in {str(path)!r}: "
            f"{date_stamp}{max_id:04d} already exists",
            path,
        )
        self.date_stamp = date_stamp
        self.max_id = max_id


class FileOpenError(SinkError):
    """Log file could not be opened for append."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Could not open log file {str(path)!r}: {reason}", path)
        self.reason = reason


class LineParseError(ValueError):
    """A line does not have the sink's line format."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line.rstrip()!r}")
        self.line = line
        self.reason = reason
