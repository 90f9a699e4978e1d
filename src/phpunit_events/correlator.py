"""Correlate lifecycle events into one terminal record per test.

PHPUnit reports a test as ``testStarted``, zero or more ``testFailed`` /
``testIgnored``, then ``testFinished``. With ParaTest the lines of several
workers interleave, so records are keyed by ``(name, flow_id)`` and any
number of keys may be open at once.

The correlator emits:

- the started record as soon as it arrives,
- nothing for fault messages (they are buffered on the key),
- one merged terminal record when the key finishes. Its event is the
  buffered fault if there was one, otherwise the finish event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from phpunit_events.core.exceptions import UnmatchedFinishError
from phpunit_events.core.models import TestResult, TestResultEvent
from phpunit_events.logging import get_logger

if TYPE_CHECKING:
    from phpunit_events.core.models import CorrelationKey, DecodedRecord

logger = get_logger(__name__)

FAULT_MESSAGE_SEPARATOR = "\n\n"


class EventCorrelator:
    """Merge started/fault/finished messages that share a correlation key.

    One instance belongs to one test run; do not share it between runs whose
    flow ids may collide.
    """

    def __init__(self, strict_finish: bool = False) -> None:
        """Initialize an empty store.

        Args:
            strict_finish: Raise UnmatchedFinishError for a finish with no
                stored record instead of logging it and passing it through.
        """
        self.strict_finish = strict_finish
        self._store: dict[CorrelationKey, TestResult] = {}

    def process(self, record: DecodedRecord | None) -> DecodedRecord | None:
        """Feed one decoded record; return what should be reported now.

        Informational records, and lifecycle records that carry no flow id,
        are returned unchanged.
        """
        if not isinstance(record, TestResult) or not record.is_correlatable:
            return record

        match record.event:
            case TestResultEvent.TEST_STARTED | TestResultEvent.TEST_SUITE_STARTED:
                return self._handle_started(record)
            case TestResultEvent.TEST_FAILED | TestResultEvent.TEST_IGNORED:
                return self._handle_fault(record)
            case TestResultEvent.TEST_FINISHED | TestResultEvent.TEST_SUITE_FINISHED:
                return self._handle_finished(record)

    def open_keys(self) -> list[CorrelationKey]:
        """Keys started (or faulted) but not finished yet, in arrival order."""
        return list(self._store)

    def pending(self) -> list[TestResult]:
        """Copies of the records held for every open key."""
        return [record.copy() for record in self._store.values()]

    def reset(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def _handle_started(self, record: TestResult) -> TestResult:
        if record.key in self._store:
            logger.warning("started_twice", name=record.name, flow_id=record.flow_id)
        self._store[record.key] = record.copy()
        return record

    def _handle_fault(self, record: TestResult) -> None:
        stored = self._store.get(record.key)

        if stored is None or not stored.is_fault:
            merged = stored.merged_with(record) if stored is not None else record.copy()
            self._store[record.key] = merged
            return None

        # A further fault for a test that already failed
        if record.message:
            stored.message = (stored.message or "") + FAULT_MESSAGE_SEPARATOR + record.message
        stored.details = [*(stored.details or []), *(record.details or [])]
        logger.debug("fault_appended", name=record.name, flow_id=record.flow_id)
        return None

    def _handle_finished(self, record: TestResult) -> TestResult:
        stored = self._store.pop(record.key, None)

        if stored is None:
            if self.strict_finish:
                raise UnmatchedFinishError(record.name, record.flow_id)
            logger.warning(
                "finished_without_started",
                name=record.name,
                flow_id=record.flow_id,
                outcome=record.event.value,
            )
            return record

        event = stored.event if stored.is_fault else record.event
        merged = stored.merged_with(record)
        merged.event = event
        logger.debug(
            "test_completed", name=record.name, flow_id=record.flow_id, outcome=event.value
        )
        return merged
