"""Output formatters for the phpunit-events CLI."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from phpunit_events.core.models import SummaryInfo, TestResult, TestResultEvent

if TYPE_CHECKING:
    from phpunit_events.core.models import DecodedRecord
    from phpunit_events.session import RunTotals

_EVENT_LABELS = {
    TestResultEvent.TEST_SUITE_STARTED: "[cyan]SUITE[/cyan]",
    TestResultEvent.TEST_SUITE_FINISHED: "[cyan]DONE [/cyan]",
    TestResultEvent.TEST_STARTED: "[dim]START[/dim]",
    TestResultEvent.TEST_FINISHED: "[green]PASS [/green]",
    TestResultEvent.TEST_FAILED: "[red]FAIL [/red]",
    TestResultEvent.TEST_IGNORED: "[yellow]SKIP [/yellow]",
}


def format_duration(duration: int | float | None) -> str:
    """Format a millisecond duration (e.g., 1530 -> '1.53 s')."""
    if duration is None:
        return ""
    if duration >= 1000:
        return f"{duration / 1000:.2f} s"
    return f"{duration} ms"


def format_record_json(record: DecodedRecord) -> str:
    """Format a record as a single JSON line."""
    return json.dumps(record.to_dict(), ensure_ascii=False)


def format_record_text(record: DecodedRecord) -> str:
    """Format a record as one rich-markup line, plus fault details."""
    if not isinstance(record, TestResult):
        if isinstance(record, SummaryInfo):
            counts = ", ".join(f"{name}: {count}" for name, count in record.counts.items())
            return f"[bold]Summary[/bold] {escape(counts)}"
        text = getattr(record, "text", None)
        return f"[dim]{escape(text if text is not None else str(record.to_dict()))}[/dim]"

    label = _EVENT_LABELS[record.event]
    title = escape(record.test_id or record.name)
    duration = format_duration(record.duration)
    line = f"{label} {title}" + (f" [dim]({duration})[/dim]" if duration else "")

    if not record.is_fault:
        return line

    lines = [line]
    for message_line in (record.message or "").splitlines():
        lines.append(f"      {escape(message_line)}")
    for detail in record.details or []:
        lines.append(f"      [dim]at {escape(detail.file)}:{detail.line}[/dim]")
    return "\n".join(lines)


def build_totals_table(totals: RunTotals) -> Table:
    """Build a table of run totals and the runner's own summary counts."""
    table = Table(title="Test run", show_header=True, header_style="bold")
    table.add_column("Result")
    table.add_column("Count", justify="right")

    table.add_row("[green]passed[/green]", str(totals.passed))
    table.add_row("[red]failed[/red]", str(totals.failed))
    table.add_row("[yellow]ignored[/yellow]", str(totals.ignored))
    if totals.malformed_lines:
        table.add_row("malformed lines", str(totals.malformed_lines))

    if totals.summary is not None:
        for name, count in totals.summary.counts.items():
            table.add_row(f"[dim]reported {name}[/dim]", str(count))
    return table
