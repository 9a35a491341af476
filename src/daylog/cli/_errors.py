"""CLI error handling and decorators."""

from __future__ import annotations

import functools
from typing import Any, Callable

import typer

from daylog.errors import SinkError


def handle_error(msg: str) -> None:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def sink_errors(f: Callable) -> Callable:
    """Decorator that turns a SinkError into a one-line message and exit code 1."""

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except SinkError as err:
            handle_error(str(err))

    return wrapper
