"""phpunit-events - Decode PHPUnit TeamCity output into test lifecycle records."""

__version__ = "0.1.0"

from phpunit_events.core.models import (
    FaultDetail,
    SummaryInfo,
    TestExtraResultEvent,
    TestResult,
    TestResultEvent,
)
from phpunit_events.correlator import EventCorrelator
from phpunit_events.parsers import EscapeCodec, OutputParser
from phpunit_events.session import TestRunSession

__all__ = [
    "EscapeCodec",
    "EventCorrelator",
    "FaultDetail",
    "OutputParser",
    "SummaryInfo",
    "TestExtraResultEvent",
    "TestResult",
    "TestResultEvent",
    "TestRunSession",
]
