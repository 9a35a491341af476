"""LogSink: one append-only file handle, one lock, one line per call.

Opening a sink (LogSink.open) runs the whole initialization sequence:

    1. Ensure the log directory exists (create it if missing)
    2. Compute today's date stamp, YYYY_MM_DD_
    3. Scan the directory for today's files and take the highest id
    4. Next id = max + 1, zero-padded to four digits
    5. Open {dir}/{stamp}{id}.log for append

Any failure is fatal and raised as a SinkError subclass. After that,
write() formats, appends and flushes under a single lock so lines from
concurrent threads never interleave.

A LogSink is an ordinary object; daylog.emitter holds the process-wide
one.
"""

from __future__ import annotations

import threading
from datetime import date, datetime
from pathlib import Path
from typing import Callable, TextIO

from daylog.config import SinkConfig
from daylog.errors import DirectoryCreationError, FileOpenError, SinkError
from daylog.logging import get_logger
from daylog.naming import resolve_log_path
from daylog.records import DEFAULT_TIME_FORMAT, Level, LogRecord, SourceLocation, format_line

Clock = Callable[[], datetime]


def ensure_directory(directory: Path) -> bool:
    """Make sure ``directory`` is a directory. Returns True if it was created."""
    if directory.exists() or directory.is_symlink():
        if not directory.is_dir():
            raise DirectoryCreationError(directory, "exists and is not a directory")
        return False
    try:
        directory.mkdir(parents=True)
    except FileExistsError:
        # created concurrently by someone else
        if not directory.is_dir():
            raise DirectoryCreationError(directory, "exists and is not a directory") from None
        return False
    except OSError as err:
        raise DirectoryCreationError(directory, err.strerror or str(err)) from err
    return True


def next_log_path(directory: Path, day: date, extension: str) -> Path:
    """resolve_log_path(), with a failed directory listing raised as a SinkError."""
    try:
        return resolve_log_path(directory, day, extension)
    except OSError as err:
        raise DirectoryCreationError(
            directory, f"could not list entries: {err.strerror or err}"
        ) from err


class LogSink:
    """Append-only, thread-safe writer for one dated log file."""

    def __init__(
        self,
        handle: TextIO,
        path: Path,
        *,
        clock: Clock | None = None,
        time_format: str = DEFAULT_TIME_FORMAT,
    ) -> None:
        self._fh = handle
        self._path = Path(path)
        self._clock: Clock = clock or datetime.now
        self._time_format = time_format
        self._lock = threading.Lock()

    @classmethod
    def open(cls, config: SinkConfig | None = None, *, clock: Clock | None = None) -> LogSink:
        """Create the next log file for today and return a sink writing to it."""
        cfg = config or SinkConfig()
        now = clock or datetime.now
        logger = get_logger("daylog.sink")
        directory = cfg.directory_path

        try:
            if ensure_directory(directory):
                logger.info("sink.directory.created", directory=str(directory))

            path = next_log_path(directory, now().date(), cfg.extension)
            logger.debug("sink.sequence.scanned", directory=str(directory), path=str(path))

            try:
                handle = open(path, "a", encoding="utf-8")
            except OSError as err:
                raise FileOpenError(path, err.strerror or str(err)) from err
        except SinkError as err:
            logger.error(
                "sink.init.failed",
                error_type=type(err).__name__,
                path=str(err.path),
                reason=str(err),
            )
            raise

        logger.info("sink.opened", path=str(path))
        return cls(handle, path, clock=now, time_format=cfg.time_format)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._fh.closed

    def write(self, message: str, level: Level, location: SourceLocation) -> None:
        """Append one line and flush it."""
        with self._lock:
            record = LogRecord(level, message, self._clock(), location)
            self._fh.write(format_line(record, self._time_format))
            self._fh.flush()

    def info(self, message: str, location: SourceLocation | None = None) -> None:
        self.write(message, Level.INFO, location or SourceLocation.capture())

    def debug(self, message: str, location: SourceLocation | None = None) -> None:
        self.write(message, Level.DEBUG, location or SourceLocation.capture())

    def warning(self, message: str, location: SourceLocation | None = None) -> None:
        self.write(message, Level.WARNING, location or SourceLocation.capture())

    def error(self, message: str, location: SourceLocation | None = None) -> None:
        self.write(message, Level.ERROR, location or SourceLocation.capture())

    def fatal(self, message: str, location: SourceLocation | None = None) -> None:
        self.write(message, Level.FATAL, location or SourceLocation.capture())

    def close(self) -> None:
        with self._lock:
            self._fh.close()

    def __enter__(self) -> LogSink:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"LogSink(path={str(self._path)!r})"
