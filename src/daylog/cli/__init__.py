"""daylog CLI -- typer-based command interface.

Commands:
    daylog next                 Show the file name the next run would create today
    daylog files [--all]        List today's (or every day's) log files
    daylog write LEVEL MESSAGE  Open a new log file and append one line
    daylog parse FILE [--json]  Read a log file back into records
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import typer

from daylog.cli._errors import handle_error, sink_errors
from daylog.config import SinkConfig
from daylog.errors import DirectoryCreationError, LineParseError
from daylog.logging import setup_diagnostics
from daylog.naming import date_stamp, list_log_files, log_file_name
from daylog.records import Level, SourceLocation, parse_line
from daylog.sink import LogSink, next_log_path

app = typer.Typer(
    name="daylog",
    help="Inspect and write dated, sequentially numbered log files.",
    no_args_is_help=True,
)

DirOption = typer.Option(None, "--dir", "-d", help="Log directory (default: DAYLOG_DIR or logs/).")


def _config(directory: Path | None) -> SinkConfig:
    cfg = SinkConfig.load()
    if directory is not None:
        cfg.directory = str(directory)
    return cfg


@app.callback()
def _setup() -> None:
    setup_diagnostics(SinkConfig.load())


@app.command("next")
@sink_errors
def next_name(directory: Path = DirOption) -> None:
    """Print the path the next sink opened today would write to. Creates nothing."""
    cfg = _config(directory)
    log_dir = cfg.directory_path
    if log_dir.exists() and not log_dir.is_dir():
        raise DirectoryCreationError(log_dir, "exists and is not a directory")

    today = date.today()
    if log_dir.is_dir():
        path = next_log_path(log_dir, today, cfg.extension)
    else:
        path = log_dir / log_file_name(date_stamp(today), 1, cfg.extension)
    typer.echo(str(path))


@app.command()
def files(
    directory: Path = DirOption,
    show_all: bool = typer.Option(False, "--all", "-a", help="Every day, not just today."),
) -> None:
    """List log files, oldest first."""
    cfg = _config(directory)
    day = None if show_all else date.today()
    found = list_log_files(cfg.directory_path, day, cfg.extension)
    if not found:
        typer.echo("No log files found.")
        return
    for path in found:
        typer.echo(f"{path.name}  {path.stat().st_size:>8} bytes")


@app.command()
@sink_errors
def write(
    level: str = typer.Argument(..., help="info | debug | warning | error | fatal"),
    message: str = typer.Argument(..., help="Message text."),
    directory: Path = DirOption,
) -> None:
    """Open the next log file for today and append MESSAGE to it."""
    try:
        lvl = Level.parse(level)
    except ValueError as err:
        handle_error(str(err))

    with LogSink.open(_config(directory)) as sink:
        sink.write(message, lvl, SourceLocation.capture(0))
    typer.echo(str(sink.path))


@app.command()
def parse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Log file to read."),
    as_json: bool = typer.Option(False, "--json", help="Emit one JSON object per line."),
) -> None:
    """Parse a log file. Malformed lines are reported on stderr and skipped."""
    malformed = 0
    with open(path, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            try:
                parsed = parse_line(line)
            except LineParseError as err:
                malformed += 1
                typer.echo(f"{path.name}:{lineno}: {err}", err=True)
                continue

            loc = parsed.location
            if as_json:
                typer.echo(
                    json.dumps(
                        {
                            "level": parsed.level.label,
                            "time": parsed.time,
                            "file": loc.file,
                            "function": loc.function,
                            "line": loc.line,
                            "message": parsed.message,
                        }
                    )
                )
            else:
                typer.echo(
                    f"{parsed.level.label:<8}{parsed.time}  "
                    f"{loc.file}:{loc.function}:{loc.line}  {parsed.message}"
                )

    if malformed:
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the daylog CLI."""
    app()
