"""Log records and the line format.

One record becomes exactly one line:

    LEVEL : [HH:MM:SS | filename | function | line] : message

Field order and separators are the on-disk format that downstream
tooling parses; parse_line() is the inverse of format_line(). Line breaks
and backslashes inside a record are escaped, so a record never spans
two physical lines.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from daylog.errors import LineParseError

DEFAULT_TIME_FORMAT = "%H:%M:%S"


class Level(Enum):
    INFO = "INFO"
    DEBUG = "DEBUG"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> Level:
        """Case-insensitive lookup by label (``"warning"`` -> WARNING)."""
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown level: {raw!r}. Available: {[lvl.value for lvl in cls]}"
            ) from None


@dataclass(frozen=True)
class SourceLocation:
    file: str
    function: str
    line: int

    @classmethod
    def capture(cls, stacklevel: int = 1) -> SourceLocation:
        """Location of a frame above the caller of capture().

        stacklevel=1 is the caller of the function that calls capture(),
        the same convention as ``logging.Logger.log(stacklevel=...)``.
        """
        try:
            frame = sys._getframe(stacklevel + 1)
        except ValueError:
            return cls("(unknown file)", "(unknown function)", 0)
        code = frame.f_code
        return cls(code.co_filename, code.co_name, frame.f_lineno)

    @property
    def basename(self) -> str:
        return re.split(r"[\\/]", self.file)[-1]


@dataclass(frozen=True)
class LogRecord:
    level: Level
    message: str
    timestamp: datetime
    location: SourceLocation


@dataclass(frozen=True)
class ParsedLine:
    """A line read back from a log file. ``location.file`` is the basename."""

    level: Level
    time: str
    location: SourceLocation
    message: str


_MESSAGE_ESCAPES = str.maketrans({"\\": "\\\\", "\n": "\\n", "\r": "\\r"})
_FIELD_ESCAPES = str.maketrans({"\\": "\\\\", "\n": "\\n", "\r": "\\r", "|": "\\|"})
_UNESCAPES = {"n": "\n", "r": "\r"}
_ESCAPED_RE = re.compile(r"\\(.)", re.DOTALL)


def _unescape(text: str) -> str:
    return _ESCAPED_RE.sub(lambda m: _UNESCAPES.get(m[1], m[1]), text)


def format_line(record: LogRecord, time_format: str = DEFAULT_TIME_FORMAT) -> str:
    """One physical line per record.

    Backslashes and line breaks are escaped (``\\n``, ``\\r``, ``\\\\``);
    file and function additionally escape ``|`` so the field separators
    stay unambiguous. parse_line() reverses all of it.
    """
    loc = record.location
    file = loc.basename.translate(_FIELD_ESCAPES)
    function = loc.function.translate(_FIELD_ESCAPES)
    return (
        f"{record.level.label} : "
        f"[{record.timestamp.strftime(time_format)} | {file} | {function} | {loc.line}]"
        f" : {record.message.translate(_MESSAGE_ESCAPES)}\n"
    )


_FIELD = r"(?:[^\\|]|\\.)*"

_LINE_RE = re.compile(
    r"(?P<level>[A-Z]+) : "
    rf"\[(?P<time>[^|]*?) \| (?P<file>{_FIELD}) \| (?P<function>{_FIELD}) \| (?P<line>\d+)\]"
    r" : (?P<message>.*)",
    re.DOTALL,
)


def parse_line(line: str) -> ParsedLine:
    """Parse one formatted line. Raises LineParseError if it is not one."""
    text = line[:-1] if line.endswith("\n") else line
    match = _LINE_RE.fullmatch(text)
    if match is None:
        raise LineParseError(line, "Not a log line")
    try:
        level = Level[match["level"]]
    except KeyError:
        raise LineParseError(line, f"Unknown level {match['level']!r}") from None
    return ParsedLine(
        level=level,
        time=match["time"],
        location=SourceLocation(
            _unescape(match["file"]), _unescape(match["function"]), int(match["line"])
        ),
        message=_unescape(match["message"]),
    )
