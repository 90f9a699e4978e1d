"""Main Typer CLI application for phpunit-events."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, TextIO

import typer
from rich.console import Console

from phpunit_events.cli.formatters import (
    build_totals_table,
    format_record_json,
    format_record_text,
)
from phpunit_events.config import get_settings
from phpunit_events.core.models import TestResult
from phpunit_events.logging import configure_logging
from phpunit_events.session import TestRunSession

app = typer.Typer(
    name="phpunit-events",
    help="Decode PHPUnit TeamCity output into structured test events",
    no_args_is_help=True,
)

OUTPUT_FORMATS = ("json", "text")


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level for diagnostics written to stderr",
        ),
    ] = None,
) -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    configure_logging(
        log_level=log_level or settings.log_level,
        json_format=settings.log_json_format,
    )


@contextmanager
def _open_input(path: Path | None) -> Iterator[TextIO]:
    if path is None or str(path) == "-":
        yield sys.stdin
        return
    if not path.exists():
        typer.echo(f"Error: File not found: {path}", err=True)
        raise typer.Exit(code=2)
    with path.open(encoding="utf-8", errors="replace") as stream:
        yield stream


@app.command()
def decode(
    path: Annotated[
        Path | None,
        typer.Argument(help="Runner output to decode (default: stdin)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option(
            "-f",
            "--output-format",
            help="Output format (json, text)",
        ),
    ] = "json",
    started: Annotated[
        bool,
        typer.Option(
            "--started/--no-started",
            help="Report started notifications",
        ),
    ] = True,
) -> None:
    """Decode runner output and print one record per reported event.

    Exits with code 1 when any test failed.
    """
    if output_format not in OUTPUT_FORMATS:
        typer.echo(f"Error: Unknown output format: {output_format}", err=True)
        raise typer.Exit(code=2)

    console = Console(highlight=False, soft_wrap=True)
    with _open_input(path) as stream, TestRunSession() as session:
        for record in session.feed_lines(stream):
            if not started and isinstance(record, TestResult) and record.event.is_started:
                continue
            if output_format == "json":
                typer.echo(format_record_json(record))
            else:
                console.print(format_record_text(record))

    raise typer.Exit(code=1 if session.totals.has_failures else 0)


@app.command()
def summary(
    path: Annotated[
        Path | None,
        typer.Argument(help="Runner output to summarize (default: stdin)"),
    ] = None,
) -> None:
    """Print pass/fail totals for a run, with the runner's reported counts."""
    console = Console(highlight=False)
    with _open_input(path) as stream, TestRunSession() as session:
        for _ in session.feed_lines(stream):
            pass

    console.print(build_totals_table(session.totals))
    raise typer.Exit(code=1 if session.totals.has_failures else 0)
