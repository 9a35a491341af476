"""Shared fixtures: isolated working directory, frozen clock, fresh process-wide state."""

from __future__ import annotations

from datetime import datetime

import pytest

from daylog.config import SinkConfig


class FrozenClock:
    """Callable clock returning a fixed, settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def _isolate(tmp_path, monkeypatch):
    """Run every test in its own directory with no DAYLOG_* env and a fresh sink."""
    from daylog.emitter import reset
    from daylog.logging import reset_diagnostics

    for key in (
        "DAYLOG_DIR",
        "DAYLOG_EXTENSION",
        "DAYLOG_TIME_FORMAT",
        "DAYLOG_DIAGNOSTICS_LEVEL",
        "DAYLOG_DIAGNOSTICS_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)

    reset()
    reset_diagnostics()
    yield
    reset()
    reset_diagnostics()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 6, 1, 12, 34, 56))


@pytest.fixture()
def log_dir(tmp_path):
    return tmp_path / "logs"


@pytest.fixture()
def config(log_dir) -> SinkConfig:
    return SinkConfig(directory=str(log_dir))
