"""daylog's own diagnostics, plus a bridge from stdlib logging into the sink.

Two separate concerns live here:

    Diagnostics - what daylog itself reports (directory created, file
        opened, init failed). Structured events via get_logger(), rendered
        by structlog onto stderr. Never written into the log file.

    Bridge - SinkHandler is a logging.Handler that appends stdlib
        LogRecords to a LogSink, so code already using logging.getLogger()
        lands in the dated log file without changes:

            from daylog.logging import attach_to_logging
            attach_to_logging()          # root logger -> process-wide sink

Before setup_diagnostics() is called, get_logger() falls back to a thin
stdlib wrapper so structured kwargs never crash.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

from daylog.records import Level, SourceLocation

if TYPE_CHECKING:
    from daylog.config import SinkConfig
    from daylog.sink import LogSink

DIAGNOSTICS_LOGGER = "daylog"


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

# Applied per logger via structlog.wrap_logger; structlog's global
# configuration is left untouched.
_PROCESSORS: list = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def _renderer(config: SinkConfig) -> Any:
    if config.diagnostics_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


class _StructuredStdlibLogger:
    """Gives a stdlib logger a structlog-like ``info("event", key=value)`` API."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log(self, level: int, event: str, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        if kwargs:
            fields = " ".join(f"{k}={v!r}" for k, v in kwargs.items())
            event = f"{event} {fields}"
        self._logger.log(level, event, exc_info=exc_info)

    def debug(self, event: str, **kw: Any) -> None:
        self._log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._log(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._log(logging.ERROR, event, **kw)

    def critical(self, event: str, **kw: Any) -> None:
        self._log(logging.CRITICAL, event, **kw)


_configured = False


def setup_diagnostics(config: SinkConfig) -> None:
    """Render daylog's diagnostics with structlog onto stderr.

    Only the "daylog" logger is touched; the root logger and any handlers
    the host application installed are left alone. Calling it again
    replaces the handler from the previous call.
    """
    global _configured

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(config),
            ],
        )
    )
    handler._daylog_managed = True  # type: ignore[attr-defined]

    diag_logger = logging.getLogger(DIAGNOSTICS_LOGGER)
    diag_logger.handlers = [
        h for h in diag_logger.handlers if not getattr(h, "_daylog_managed", False)
    ]
    diag_logger.addHandler(handler)
    diag_logger.setLevel(getattr(logging, config.diagnostics_level.upper(), logging.WARNING))
    # keep diagnostics out of whatever the root logger feeds, the sink included
    diag_logger.propagate = False

    _configured = True


def get_logger(name: str = DIAGNOSTICS_LOGGER, **initial_values: Any) -> Any:
    """Diagnostics logger accepting ``logger.info("event", key=value)``."""
    if _configured:
        return structlog.wrap_logger(
            logging.getLogger(name),
            processors=_PROCESSORS,
            wrapper_class=structlog.stdlib.BoundLogger,
            **initial_values,
        )
    return _StructuredStdlibLogger(logging.getLogger(name))


def reset_diagnostics() -> None:
    """Reset for testing."""
    global _configured

    diag_logger = logging.getLogger(DIAGNOSTICS_LOGGER)
    diag_logger.handlers = [
        h for h in diag_logger.handlers if not getattr(h, "_daylog_managed", False)
    ]
    diag_logger.propagate = True
    diag_logger.setLevel(logging.NOTSET)
    _configured = False


# ---------------------------------------------------------------------------
# Bridge: stdlib logging -> LogSink
# ---------------------------------------------------------------------------


def level_for(levelno: int) -> Level:
    """Map a stdlib level number onto the sink's five levels."""
    if levelno >= logging.CRITICAL:
        return Level.FATAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARNING
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class SinkHandler(logging.Handler):
    """Handler that appends formatted records to a LogSink.

    The record's own pathname/funcName/lineno become the source location,
    so lines point at the logging call, not at this handler.
    """

    def __init__(self, sink: LogSink, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._sink = sink

    @property
    def sink(self) -> LogSink:
        return self._sink

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == DIAGNOSTICS_LOGGER or record.name.startswith(f"{DIAGNOSTICS_LOGGER}."):
            return
        try:
            msg = self.format(record)
            location = SourceLocation(
                record.pathname, record.funcName or "(unknown function)", record.lineno
            )
            self._sink.write(msg, level_for(record.levelno), location)
        except Exception:
            self.handleError(record)


def attach_to_logging(
    logger: logging.Logger | None = None, sink: LogSink | None = None
) -> SinkHandler:
    """Install a SinkHandler on ``logger`` (root by default).

    Uses the process-wide sink unless one is given. Initialization errors
    propagate from here, not from later logging calls.
    """
    if sink is None:
        from daylog.emitter import get_sink

        sink = get_sink()

    target = logger if logger is not None else logging.getLogger()
    for existing in target.handlers:
        if isinstance(existing, SinkHandler) and existing.sink is sink:
            return existing
    handler = SinkHandler(sink)
    target.addHandler(handler)
    return handler
