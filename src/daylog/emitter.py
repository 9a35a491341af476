"""Process-wide sink: initialize once, log everywhere.

The five level functions are the only API most modules need:

    from daylog import info, error
    info("started")

The first call opens the sink (directory check, sequence scan, file
open); every later call reuses it. Initialization runs at most once per
process even when many threads log at the same time.

State machine:
    uninitialized -> ready     (terminal)
    uninitialized -> failed    (terminal; the first error is re-raised
                                on every later call, the filesystem is
                                not touched again)

reset() exists for tests only.
"""

from __future__ import annotations

import threading

from daylog.config import SinkConfig
from daylog.errors import SinkError
from daylog.logging import setup_diagnostics
from daylog.records import Level, SourceLocation
from daylog.sink import Clock, LogSink

_lock = threading.Lock()
_sink: LogSink | None = None
_failure: SinkError | None = None


def get_sink(config: SinkConfig | None = None, *, clock: Clock | None = None) -> LogSink:
    """Return the process-wide sink, opening it on first use.

    The initializing call also sets up daylog's own diagnostics from
    ``config``. ``config`` and ``clock`` only matter on the call that performs the
    initialization; later calls return the existing sink unchanged.
    """
    global _sink, _failure

    sink = _sink
    if sink is not None:
        return sink

    with _lock:
        if _sink is not None:
            return _sink
        if _failure is not None:
            raise _failure
        cfg = config or SinkConfig.load()
        # diagnostics first so the open sequence itself is reported
        setup_diagnostics(cfg)
        try:
            _sink = LogSink.open(cfg, clock=clock)
        except SinkError as err:
            _failure = err
            raise
        return _sink


def is_configured() -> bool:
    return _sink is not None


def state() -> str:
    """``"uninitialized"``, ``"ready"`` or ``"failed"``."""
    if _sink is not None:
        return "ready"
    if _failure is not None:
        return "failed"
    return "uninitialized"


def reset() -> None:
    """Reset for testing. Closes the current sink, if any."""
    global _sink, _failure

    with _lock:
        if _sink is not None and not _sink.closed:
            _sink.close()
        _sink = None
        _failure = None


def _log(message: str, level: Level, location: SourceLocation) -> None:
    get_sink().write(message, level, location)


def info(message: str, location: SourceLocation | None = None) -> None:
    _log(message, Level.INFO, location or SourceLocation.capture())


def debug(message: str, location: SourceLocation | None = None) -> None:
    _log(message, Level.DEBUG, location or SourceLocation.capture())


def warning(message: str, location: SourceLocation | None = None) -> None:
    _log(message, Level.WARNING, location or SourceLocation.capture())


def error(message: str, location: SourceLocation | None = None) -> None:
    _log(message, Level.ERROR, location or SourceLocation.capture())


def fatal(message: str, location: SourceLocation | None = None) -> None:
    _log(message, Level.FATAL, location or SourceLocation.capture())
