"""Decoder for ``##teamcity[...]`` service-message lines.

PHPUnit's ``--teamcity`` printer reports the test lifecycle as lines like::

    ##teamcity[testStarted name='test_passed' locationHint='php_qn://...' flowId='8024']

The payload is an event name followed by ``key='value'`` pairs whose values
use the ``|`` escapes handled by :class:`EscapeCodec`.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from phpunit_events.core.exceptions import MalformedLineError
from phpunit_events.core.models import (
    FaultDetail,
    ServiceMessage,
    TestCount,
    TestResult,
    TestResultEvent,
)

if TYPE_CHECKING:
    from phpunit_events.core.models import DecodedRecord
    from phpunit_events.parsers.escape import EscapeCodec

MARKER_PATTERN = re.compile(r"^\s*#+teamcity")

_EVENT_PATTERN = re.compile(r"^\s*(?P<event>[^\s'=]+)(?=\s|$)")
_ARGUMENT_PATTERN = re.compile(r"(?P<key>[\w-]+)='(?P<value>[^']*)'")
_FILE_LINE_PATTERN = re.compile(r"^(?P<file>.+):(?P<line>\d+)$")
_LINE_SPLIT_PATTERN = re.compile(r"\r\n|\n")
_DATA_SET_SUFFIX = re.compile(r"\swith\sdata\sset\s[#\"].+$")

LOCATION_HINT_SCHEME = "php_qn://"

# Service-message attribute -> TestResult field
_RESULT_FIELDS = {
    "name": "name",
    "flowId": "flow_id",
    "locationHint": "location_hint",
    "duration": "duration",
    "message": "message",
    "type": "type",
    "actual": "actual",
    "expected": "expected",
}


class ServiceMessageDecoder:
    """Turn one service-message line into a decoded record."""

    def __init__(self, escape_codec: EscapeCodec) -> None:
        self._codec = escape_codec

    def is_service_message(self, line: str) -> bool:
        return bool(MARKER_PATTERN.match(line))

    def decode(self, line: str) -> DecodedRecord:
        """Decode a line for which :meth:`is_service_message` is true.

        A lifecycle event without ``name`` cannot be correlated and decodes
        to a plain :class:`ServiceMessage`.

        Raises:
            MalformedLineError: If the payload carries no event name.
        """
        payload = MARKER_PATTERN.sub("", line.strip(), count=1)
        payload = re.sub(r"^\[|\]$", "", payload)

        event, arguments = self.tokenize(payload, line)

        try:
            lifecycle_event = TestResultEvent(event)
        except ValueError:
            if event == "testCount" and "count" in arguments:
                return TestCount(
                    count=_to_number(arguments["count"]),
                    flow_id=_to_number(arguments["flowId"]) if "flowId" in arguments else None,
                )
            return ServiceMessage(event=event, attributes=arguments)

        if "name" not in arguments:
            return ServiceMessage(event=event, attributes=arguments)
        return self._to_result(lifecycle_event, arguments)

    def tokenize(self, payload: str, line: str = "") -> tuple[str, dict[str, str]]:
        """Split a payload into its event name and unescaped arguments."""
        text = self._codec.escape_single_quote(payload)
        text = self._codec.unescape(text)

        match = _EVENT_PATTERN.match(text)
        if not match:
            raise MalformedLineError(line or payload, "missing event name")

        arguments = {
            m.group("key"): m.group("value")
            for m in _ARGUMENT_PATTERN.finditer(text, match.end())
        }
        return match.group("event"), self._codec.unescape_single_quote(arguments)

    def _to_result(self, event: TestResultEvent, arguments: dict[str, str]) -> TestResult:
        values: dict = {"event": event, "flow_id": None}
        extra: dict[str, str] = {}
        for key, value in arguments.items():
            attribute = _RESULT_FIELDS.get(key)
            if attribute is None:
                if key != "details":
                    extra[key] = value
                continue
            values[attribute] = _to_number(value) if key in ("flowId", "duration") else value

        result = TestResult(**values, extra=extra)
        if result.location_hint:
            result.file, result.id, result.test_id = parse_location_hint(result.location_hint)
        if "details" in arguments:
            result.message, result.details = parse_details(
                arguments.get("message", ""), arguments["details"]
            )
        return result


def parse_location_hint(location_hint: str) -> tuple[str, str, str]:
    """Split a ``php_qn://`` hint into ``(file, id, test_id)``.

    ``test_id`` is ``id`` without any "with data set" suffix, so every
    data-provider invocation of one method shares it.
    """
    hint = location_hint
    if hint.startswith(LOCATION_HINT_SCHEME):
        hint = hint[len(LOCATION_HINT_SCHEME) :]
    file, *rest = hint.replace("::\\", "::").split("::")
    test_id = "::".join(rest)
    return file, test_id, _DATA_SET_SUFFIX.sub("", test_id)


def parse_details(message: str, details: str) -> tuple[str, list[FaultDetail]]:
    """Pull ``file:line`` locations out of a fault's message and details.

    Locations found in ``message`` are removed from it and come first in the
    returned list, followed by those found in ``details``.
    """
    from_message = parse_file_and_line(message)
    for detail in from_message:
        message = message.replace(f"{detail.file}:{detail.line}", "", 1)
    return message.strip(), [*from_message, *parse_file_and_line(details)]


def parse_file_and_line(text: str) -> list[FaultDetail]:
    found = []
    for line in _LINE_SPLIT_PATTERN.split(text.strip()):
        match = _FILE_LINE_PATTERN.match(line)
        if match:
            file = match.group("file").strip().lstrip("-").strip()
            found.append(FaultDetail(file=file, line=int(match.group("line"))))
    return found


def _to_number(value: str) -> int | float | str:
    """Convert a numeric attribute; non-numeric text is kept as-is."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value
