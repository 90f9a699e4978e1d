"""Parsers for PHPUnit TeamCity output.

Usage:
    from phpunit_events.parsers import OutputParser

    parser = OutputParser()
    record = parser.parse("##teamcity[testStarted name='test_a' flowId='1']")
"""

from .escape import EscapeCodec
from .output import OutputParser
from .recognizers import (
    ConfigurationRecognizer,
    LineRecognizer,
    ProcessesRecognizer,
    RuntimeRecognizer,
    SummaryRecognizer,
    TimingRecognizer,
    VersionRecognizer,
    default_recognizers,
)
from .service_messages import ServiceMessageDecoder, parse_details, parse_location_hint

__all__ = [
    "EscapeCodec",
    "OutputParser",
    "ServiceMessageDecoder",
    "LineRecognizer",
    "VersionRecognizer",
    "RuntimeRecognizer",
    "ConfigurationRecognizer",
    "ProcessesRecognizer",
    "TimingRecognizer",
    "SummaryRecognizer",
    "default_recognizers",
    "parse_details",
    "parse_location_hint",
]
