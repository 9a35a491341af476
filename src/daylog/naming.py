"""Log file naming: ``{YYYY_MM_DD_}{NNNN}{.log}``.

The next sequence id is derived from what is already on disk: scan
today's files, take the highest id, add one. No counter is persisted,
so a restarted process always picks up where the last one stopped.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path

from daylog.errors import SequenceExhaustedError

DEFAULT_EXTENSION = ".log"
SEQUENCE_WIDTH = 4
MAX_SEQUENCE = 9999

_ANY_STAMP = r"[0-9]{4}_[0-9]{2}_[0-9]{2}_"


def date_stamp(day: date) -> str:
    """``2025_06_01_`` for June 1st 2025. Numeric fields only, no locale."""
    return f"{day.year:04d}_{day.month:02d}_{day.day:02d}_"


def _name_pattern(stamp_pattern: str, extension: str) -> re.Pattern[str]:
    return re.compile(
        f"({stamp_pattern})([0-9]{{{SEQUENCE_WIDTH}}}){re.escape(extension)}"
    )


def parse_sequence(name: str, stamp: str, extension: str = DEFAULT_EXTENSION) -> int | None:
    """Sequence id of ``name`` if it is ``{stamp}{4 digits}{extension}``, else None."""
    match = _name_pattern(re.escape(stamp), extension).fullmatch(name)
    if match is None:
        return None
    return int(match.group(2))


def scan_max_sequence(directory: Path, stamp: str, extension: str = DEFAULT_EXTENSION) -> int:
    """Highest sequence id among regular files for ``stamp``; 0 if none.

    Entries that are not regular files, or whose names do not match the
    naming scheme exactly, are skipped.
    """
    max_id = 0
    for entry in Path(directory).iterdir():
        seq = parse_sequence(entry.name, stamp, extension)
        if seq is None or not entry.is_file():
            continue
        max_id = max(max_id, seq)
    return max_id


def next_sequence(max_id: int, directory: Path | str, stamp: str) -> int:
    if max_id >= MAX_SEQUENCE:
        raise SequenceExhaustedError(directory, stamp, max_id)
    return max_id + 1


def log_file_name(stamp: str, seq: int, extension: str = DEFAULT_EXTENSION) -> str:
    return f"{stamp}{seq:0{SEQUENCE_WIDTH}d}{extension}"


def resolve_log_path(directory: Path, day: date, extension: str = DEFAULT_EXTENSION) -> Path:
    """Path of the file a sink opened on ``day`` would create in ``directory``.

    The directory must already exist.
    """
    stamp = date_stamp(day)
    max_id = scan_max_sequence(directory, stamp, extension)
    seq = next_sequence(max_id, directory, stamp)
    return Path(directory) / log_file_name(stamp, seq, extension)


def list_log_files(
    directory: Path, day: date | None = None, extension: str = DEFAULT_EXTENSION
) -> list[Path]:
    """Log files in ``directory`` for ``day`` (or every day), oldest first."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    stamp_pattern = re.escape(date_stamp(day)) if day is not None else _ANY_STAMP
    pattern = _name_pattern(stamp_pattern, extension)
    found = [
        entry
        for entry in directory.iterdir()
        if pattern.fullmatch(entry.name) and entry.is_file()
    ]
    return sorted(found, key=lambda p: p.name)
