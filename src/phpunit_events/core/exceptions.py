"""Shared exceptions for the phpunit-events package."""

from __future__ import annotations


class PhpUnitEventsError(Exception):
    """Base class for phpunit-events errors."""


class MalformedLineError(PhpUnitEventsError):
    """Exception raised when a recognized line cannot be decoded.

    A recognizer (or the service-message marker) claimed the line, but the
    fields it needs are missing. The line is not silently turned into a
    partial record.
    """

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed runner output ({reason}): {line!r}")


class UnmatchedFinishError(PhpUnitEventsError):
    """Exception raised in strict mode when a finish arrives for an unknown key."""

    def __init__(self, name: str, flow_id: int) -> None:
        self.name = name
        self.flow_id = flow_id
        super().__init__(
            f"Finished message for {name!r} (flowId={flow_id}) has no matching started message"
        )
