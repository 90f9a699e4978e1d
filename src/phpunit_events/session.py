"""Drive one test run's output through the parser and the correlator."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from phpunit_events.config import get_settings
from phpunit_events.core.exceptions import MalformedLineError
from phpunit_events.core.models import SummaryInfo, TestResult, TestResultEvent
from phpunit_events.correlator import EventCorrelator
from phpunit_events.logging import get_logger, run_context
from phpunit_events.parsers.output import OutputParser

if TYPE_CHECKING:
    from phpunit_events.config import Settings
    from phpunit_events.core.models import DecodedRecord

logger = get_logger(__name__)


@dataclass
class RunTotals:
    """Counts of terminal test records seen during a run."""

    passed: int = 0
    failed: int = 0
    ignored: int = 0
    malformed_lines: int = 0
    summary: SummaryInfo | None = None
    failures: list[TestResult] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def record(self, result: DecodedRecord) -> None:
        if isinstance(result, SummaryInfo):
            self.summary = result
            return
        if not isinstance(result, TestResult) or result.event.is_started:
            return
        # Suite records only close a group; they are not tests
        if result.event is TestResultEvent.TEST_SUITE_FINISHED:
            return
        if result.event is TestResultEvent.TEST_FAILED:
            self.failed += 1
            self.failures.append(result)
        elif result.event is TestResultEvent.TEST_IGNORED:
            self.ignored += 1
        else:
            self.passed += 1


class TestRunSession:
    """Decode and correlate the output of one test-runner invocation.

    The caller splits the raw stream into lines and feeds them in order.
    Every session owns its own parser state and correlation store.
    """

    __test__ = False

    def __init__(
        self,
        parser: OutputParser | None = None,
        correlator: EventCorrelator | None = None,
        settings: Settings | None = None,
        run_id: str | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.parser = parser or OutputParser()
        self.correlator = correlator or EventCorrelator(strict_finish=self.settings.strict_finish)
        self.run_id = run_id or uuid.uuid4().hex[:12]
        self.totals = RunTotals()
        self.closed = False
        logger.debug("run_started", run_id=self.run_id, strict_finish=self.settings.strict_finish)

    def feed(self, line: str) -> DecodedRecord | None:
        """Process one line; return the record to report for it, if any.

        A malformed line is logged and dropped, the run carries on.
        """
        with run_context(self.run_id):
            try:
                record = self.parser.parse(line.rstrip("\r\n"))
            except MalformedLineError as e:
                self.totals.malformed_lines += 1
                logger.warning("malformed_line", reason=e.reason, line=e.line)
                return None

            result = self.correlator.process(record)
            if result is not None:
                self.totals.record(result)
            return result

    def feed_lines(self, lines: Iterable[str]) -> Iterator[DecodedRecord]:
        """Process lines in order, yielding every record that is reported."""
        for line in lines:
            result = self.feed(line)
            if result is not None:
                yield result

    def close(self) -> list[TestResult]:
        """End the run and return records for tests that never finished.

        The correlation store is emptied; leaked keys are logged as warnings
        unless auditing is disabled in settings.
        """
        with run_context(self.run_id):
            leaked = self.correlator.pending()
            if self.settings.audit_open_keys:
                for record in leaked:
                    logger.warning(
                        "test_never_finished",
                        name=record.name,
                        flow_id=record.flow_id,
                        outcome=record.event.value,
                    )
            logger.info(
                "run_closed",
                passed=self.totals.passed,
                failed=self.totals.failed,
                ignored=self.totals.ignored,
                malformed_lines=self.totals.malformed_lines,
                open_keys=len(leaked),
            )
            self.correlator.reset()
            self.closed = True
            return leaked

    def __enter__(self) -> TestRunSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self.closed:
            self.close()
