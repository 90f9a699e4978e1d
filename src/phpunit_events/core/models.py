"""Decoded record model for PHPUnit TeamCity output.

Every line of runner output decodes into at most one record. Lifecycle
records (``TestResult``) carry a correlation key of ``(name, flow_id)`` and
are merged by the correlator; informational records carry no key and are
forwarded as-is.

All records expose ``kind`` and ``to_dict()``. Dictionaries use the wire
attribute names (``flowId``, ``locationHint``, ``testId``) and omit optional
fields that were not reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar, Union


class TestResultEvent(Enum):
    """Lifecycle events that take part in correlation."""

    __test__ = False

    TEST_SUITE_STARTED = "testSuiteStarted"
    TEST_SUITE_FINISHED = "testSuiteFinished"
    TEST_STARTED = "testStarted"
    TEST_FAILED = "testFailed"
    TEST_IGNORED = "testIgnored"
    TEST_FINISHED = "testFinished"

    @property
    def is_started(self) -> bool:
        return self in (TestResultEvent.TEST_STARTED, TestResultEvent.TEST_SUITE_STARTED)

    @property
    def is_fault(self) -> bool:
        return self in (TestResultEvent.TEST_FAILED, TestResultEvent.TEST_IGNORED)

    @property
    def is_finished(self) -> bool:
        return self in (TestResultEvent.TEST_FINISHED, TestResultEvent.TEST_SUITE_FINISHED)


class TestExtraResultEvent(Enum):
    """Kinds of informational records."""

    __test__ = False

    TEST_VERSION = "testVersion"
    TEST_RUNTIME = "testRuntime"
    TEST_CONFIGURATION = "testConfiguration"
    TEST_PROCESSES = "testProcesses"
    TEST_COUNT = "testCount"
    TIME_AND_MEMORY = "timeAndMemory"
    TEST_RESULT_SUMMARY = "testResultSummary"


# =============================================================================
# LIFECYCLE RECORDS
# =============================================================================


@dataclass(frozen=True)
class FaultDetail:
    """A ``file:line`` location extracted from a fault message."""

    file: str
    line: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line}


CorrelationKey = tuple[str, int]

# Python attribute name -> wire attribute name
_WIRE_NAMES = {
    "flow_id": "flowId",
    "location_hint": "locationHint",
    "test_id": "testId",
}


@dataclass
class TestResult:
    """A lifecycle event for a suite or a single test.

    Started records carry the location fields (``id``, ``file``,
    ``location_hint``, ``test_id``). Finished records carry ``duration``.
    Failed and Ignored records carry ``message`` and ``details`` plus the
    optional comparison fields. Attributes the decoder does not model are
    kept in ``extra``.
    """

    __test__ = False

    event: TestResultEvent
    name: str
    flow_id: int | None
    id: str | None = None
    file: str | None = None
    location_hint: str | None = None
    test_id: str | None = None
    duration: int | float | None = None
    message: str | None = None
    details: list[FaultDetail] | None = None
    type: str | None = None
    actual: str | None = None
    expected: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def kind(self) -> TestResultEvent:
        return self.event

    @property
    def key(self) -> CorrelationKey:
        """Correlation key: the same name may run concurrently on several flows."""
        return (self.name, self.flow_id)

    @property
    def is_fault(self) -> bool:
        return self.event.is_fault

    @property
    def is_correlatable(self) -> bool:
        """Only records tagged with a flow id take part in correlation."""
        return self.flow_id is not None

    def copy(self) -> TestResult:
        """Return a copy that does not share ``details`` or ``extra``."""
        return replace(
            self,
            details=list(self.details) if self.details is not None else None,
            extra=dict(self.extra),
        )

    def merged_with(self, other: TestResult) -> TestResult:
        """Overlay every field ``other`` reports on top of this record.

        Fields that are ``None`` on ``other`` keep this record's value.
        ``event`` always comes from ``other``.
        """
        changes: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(other, f.name)
            if value is not None:
                changes[f.name] = list(value) if f.name == "details" else value
        merged = replace(self.copy(), **changes)
        merged.extra.update(other.extra)
        return merged

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {"kind": self.kind.value, "event": self.event.value}
        for f in fields(self):
            if f.name in ("event", "extra"):
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "details":
                value = [detail.to_dict() for detail in value]
            data[_WIRE_NAMES.get(f.name, f.name)] = value
        for name, value in self.extra.items():
            data.setdefault(name, value)
        return data


# =============================================================================
# INFORMATIONAL RECORDS
# =============================================================================


@dataclass
class TestCount:
    """Number of tests announced by the runner before execution."""

    __test__ = False

    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TEST_COUNT

    count: int
    flow_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value, "count": self.count}
        if self.flow_id is not None:
            data["flowId"] = self.flow_id
        return data


@dataclass
class ServiceMessage:
    """A service message whose event takes no part in correlation."""

    event: str
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        return self.event

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.event, "event": self.event, **self.attributes}


@dataclass
class _TextRecord:
    """Base for records recognized from a free-form banner line."""

    kind: ClassVar[TestExtraResultEvent]

    text: str

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                data[f.name] = value
        return data


@dataclass
class VersionInfo(_TextRecord):
    """``PHPUnit 9.5.26`` or ``ParaTest v6.6.4 upon PHPUnit 9.5.26``."""

    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TEST_VERSION

    phpunit: str = ""
    paratest: str | None = None


@dataclass
class RuntimeInfo(_TextRecord):
    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TEST_RUNTIME

    runtime: str = ""


@dataclass
class ConfigurationInfo(_TextRecord):
    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TEST_CONFIGURATION

    configuration: str = ""


@dataclass
class ProcessesInfo(_TextRecord):
    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TEST_PROCESSES

    processes: str = ""


@dataclass
class TimingInfo(_TextRecord):
    """``Time: 00:00.049, Memory: 6.00 MB``."""

    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TIME_AND_MEMORY

    time: str = ""
    memory: str = ""


SUMMARY_FIELDS = ("tests", "assertions", "errors", "failures", "skipped", "incomplete", "risky")


@dataclass
class SummaryInfo(_TextRecord):
    """Aggregate counts from the final summary line.

    A count is ``None`` when the line did not mention it; that means
    "not reported", not zero. Counters outside the fixed set (warnings,
    deprecations, ...) are kept in ``extra``.
    """

    kind: ClassVar[TestExtraResultEvent] = TestExtraResultEvent.TEST_RESULT_SUMMARY

    tests: int | None = None
    assertions: int | None = None
    errors: int | None = None
    failures: int | None = None
    skipped: int | None = None
    incomplete: int | None = None
    risky: int | None = None
    extra: dict[str, int] = field(default_factory=dict)

    @property
    def counts(self) -> dict[str, int]:
        """Only the counts the line actually reported."""
        reported = {name: getattr(self, name) for name in SUMMARY_FIELDS}
        reported = {name: count for name, count in reported.items() if count is not None}
        reported.update(self.extra)
        return reported

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, **self.counts, "text": self.text}


InfoRecord = Union[
    VersionInfo,
    RuntimeInfo,
    ConfigurationInfo,
    ProcessesInfo,
    TimingInfo,
    SummaryInfo,
]

DecodedRecord = Union[TestResult, TestCount, ServiceMessage, InfoRecord]
