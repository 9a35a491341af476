"""Sink configuration, env-var driven.

All settings have safe defaults; zero config writes to ``logs/``.

Priority: env var > YAML file > default.
    DAYLOG_DIR                  log directory            (default: logs)
    DAYLOG_EXTENSION            log file extension       (default: .log)
    DAYLOG_TIME_FORMAT          per-line time format     (default: %H:%M:%S)
    DAYLOG_DIAGNOSTICS_LEVEL    level of daylog's own stderr diagnostics (default: WARNING)
    DAYLOG_DIAGNOSTICS_FORMAT   console | json           (default: console)
YAML file default: ./daylog.yaml
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from daylog.records import DEFAULT_TIME_FORMAT

_DEFAULT_PATH = Path("daylog.yaml")

_ENV_KEYS = {
    "directory": "DAYLOG_DIR",
    "extension": "DAYLOG_EXTENSION",
    "time_format": "DAYLOG_TIME_FORMAT",
    "diagnostics_level": "DAYLOG_DIAGNOSTICS_LEVEL",
    "diagnostics_format": "DAYLOG_DIAGNOSTICS_FORMAT",
}


@dataclass
class SinkConfig:
    """Where the log file goes and how its lines look."""

    directory: str = field(default_factory=lambda: os.environ.get("DAYLOG_DIR", "logs"))

    extension: str = field(default_factory=lambda: os.environ.get("DAYLOG_EXTENSION", ".log"))

    time_format: str = field(
        default_factory=lambda: os.environ.get("DAYLOG_TIME_FORMAT", DEFAULT_TIME_FORMAT)
    )

    # daylog's own diagnostics (stderr, never the log file)
    diagnostics_level: str = field(
        default_factory=lambda: os.environ.get("DAYLOG_DIAGNOSTICS_LEVEL", "WARNING")
    )
    diagnostics_format: str = field(
        default_factory=lambda: os.environ.get("DAYLOG_DIAGNOSTICS_FORMAT", "console")
    )  # "console" | "json"

    def __post_init__(self) -> None:
        if not self.extension.startswith("."):
            self.extension = f".{self.extension}"

    @property
    def directory_path(self) -> Path:
        return Path(self.directory)

    @classmethod
    def load(cls, path: Path | None = None) -> SinkConfig:
        """Load settings from a YAML file, then let env vars override them."""
        file_path = path or _DEFAULT_PATH
        file_values: dict[str, str] = {}

        if file_path.exists():
            raw = yaml.safe_load(file_path.read_text()) or {}
            if isinstance(raw, dict):
                for k, v in raw.items():
                    if k in _ENV_KEYS and v is not None:
                        file_values[k] = str(v)

        kwargs: dict[str, str] = {}
        for f in fields(cls):
            # env vars are picked up by the field's default_factory
            if _ENV_KEYS[f.name] in os.environ:
                continue
            if f.name in file_values:
                kwargs[f.name] = file_values[f.name]

        return cls(**kwargs)

    def to_dict(self) -> dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
