"""daylog: one dated, sequentially numbered log file per process.

Public API:
    info/debug/warning/error/fatal(message)  - append a line to the process-wide sink
    get_sink(config)   - the process-wide LogSink (opened on first use)
    LogSink.open(cfg)  - an explicitly owned sink, no global state
    reset()            - reset for testing

Files land in ``logs/YYYY_MM_DD_NNNN.log``; each line reads
``LEVEL : [HH:MM:SS | file | function | line] : message``.
"""

from daylog.config import SinkConfig
from daylog.emitter import (
    debug,
    error,
    fatal,
    get_sink,
    info,
    is_configured,
    reset,
    state,
    warning,
)
from daylog.errors import (
    DirectoryCreationError,
    FileOpenError,
    LineParseError,
    SequenceExhaustedError,
    SinkError,
)
from daylog.records import Level, LogRecord, ParsedLine, SourceLocation, format_line, parse_line
from daylog.sink import LogSink

__all__ = [
    # Level functions
    "info",
    "debug",
    "warning",
    "error",
    "fatal",
    # Process-wide sink
    "get_sink",
    "is_configured",
    "state",
    "reset",
    # Explicit sink
    "LogSink",
    "SinkConfig",
    # Records
    "Level",
    "LogRecord",
    "SourceLocation",
    "ParsedLine",
    "format_line",
    "parse_line",
    # Errors
    "SinkError",
    "DirectoryCreationError",
    "SequenceExhaustedError",
    "FileOpenError",
    "LineParseError",
]
