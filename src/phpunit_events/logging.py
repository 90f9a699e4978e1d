"""Structured logging for phpunit-events.

Diagnostics go to stderr so that stdout stays free for decoded records.
Every event logged while a run is active carries that run's ``run_id``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from structlog.typing import EventDict, Processor, WrappedLogger

run_id_ctx: ContextVar[str] = ContextVar("run_id", default="")


@contextmanager
def run_context(run_id: str) -> Iterator[None]:
    """Attach ``run_id`` to every event logged inside the block."""
    token = run_id_ctx.set(run_id)
    try:
        yield
    finally:
        run_id_ctx.reset(token)


def add_run_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    run_id = run_id_ctx.get()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


def _level_number(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    log_level: str = "WARNING",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structlog for decoder diagnostics.

    Args:
        log_level: Minimum level name; unknown names fall back to WARNING.
        json_format: Render one JSON object per event instead of console text.
        stream: Output stream (defaults to sys.stderr).
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_run_id,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Return a lazy logger that picks up whatever configuration is current."""
    return structlog.get_logger(logger_name=name)
