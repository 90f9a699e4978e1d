"""Tests for decoded record models."""

from __future__ import annotations

from phpunit_events.core.models import (
    FaultDetail,
    ServiceMessage,
    SummaryInfo,
    TestResult,
    TestResultEvent,
    TimingInfo,
    VersionInfo,
)


class TestTestResultEvent:
    """Grouping of lifecycle events."""

    def test_groups(self):
        """Every event belongs to exactly one group."""
        for event in TestResultEvent:
            groups = [event.is_started, event.is_fault, event.is_finished]
            assert groups.count(True) == 1, event


class TestTestResult:
    """Tests for TestResult."""

    def test_key_and_kind(self):
        """The key is name plus flow id, kind mirrors event."""
        result = TestResult(event=TestResultEvent.TEST_STARTED, name="t", flow_id=7)

        assert result.key == ("t", 7)
        assert result.kind is TestResultEvent.TEST_STARTED
        assert not result.is_fault

    def test_merged_with_overlays_reported_fields(self):
        """Fields that are None on the overlay keep their value."""
        base = TestResult(
            event=TestResultEvent.TEST_STARTED,
            name="t",
            flow_id=1,
            id="Ns\\T::t",
            file="T.php",
            extra={"nodeId": "1"},
        )
        overlay = TestResult(
            event=TestResultEvent.TEST_FINISHED,
            name="t",
            flow_id=1,
            duration=5,
            extra={"parentNodeId": "0"},
        )

        merged = base.merged_with(overlay)

        assert merged.event is TestResultEvent.TEST_FINISHED
        assert merged.id == "Ns\\T::t"
        assert merged.file == "T.php"
        assert merged.duration == 5
        assert merged.extra == {"nodeId": "1", "parentNodeId": "0"}
        assert base.extra == {"nodeId": "1"}

    def test_copy_does_not_share_details(self):
        """Appending to a copy's details leaves the original alone."""
        original = TestResult(
            event=TestResultEvent.TEST_FAILED,
            name="t",
            flow_id=1,
            details=[FaultDetail("a.php", 1)],
        )

        copy = original.copy()
        copy.details.append(FaultDetail("b.php", 2))

        assert original.details == [FaultDetail("a.php", 1)]

    def test_to_dict_omits_unreported_fields(self):
        """Only fields with a value are serialized."""
        result = TestResult(event=TestResultEvent.TEST_FINISHED, name="t", flow_id=1, duration=0)

        assert result.to_dict() == {
            "kind": "testFinished",
            "event": "testFinished",
            "name": "t",
            "flowId": 1,
            "duration": 0,
        }


class TestInfoRecords:
    """Tests for informational records."""

    def test_kind_values(self):
        """Each record type reports its own kind."""
        assert VersionInfo(text="PHPUnit 9.5.0", phpunit="9.5.0").kind.value == "testVersion"
        assert TimingInfo(text="", time="1 ms", memory="4 MB").kind.value == "timeAndMemory"
        assert SummaryInfo(text="").kind.value == "testResultSummary"

    def test_summary_counts_skip_unreported(self):
        """Absent counters are not reported as zero."""
        summary = SummaryInfo(text="OK (2 tests, 0 assertions)", tests=2, assertions=0)

        assert summary.counts == {"tests": 2, "assertions": 0}

    def test_service_message_to_dict(self):
        """Generic messages keep their attributes."""
        message = ServiceMessage(event="message", attributes={"text": "hello"})

        assert message.to_dict() == {"kind": "message", "event": "message", "text": "hello"}
