"""Recognizers for the free-form lines PHPUnit prints around a run.

Each recognizer handles one line shape::

    PHPUnit 9.5.26 by Sebastian Bergmann and contributors.
    Runtime:       PHP 8.1.12
    Configuration: /app/phpunit.xml
    Processes:     4
    Time: 00:00.049, Memory: 6.00 MB
    OK (5 tests, 10 assertions)
    Tests: 5, Assertions: 10, Failures: 2, Skipped: 1.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from phpunit_events.core.exceptions import MalformedLineError
from phpunit_events.core.models import (
    SUMMARY_FIELDS,
    ConfigurationInfo,
    ProcessesInfo,
    RuntimeInfo,
    SummaryInfo,
    TimingInfo,
    VersionInfo,
)

RecordT = TypeVar("RecordT")

# Counter names that are never pluralized
_UNCOUNTED = ("skipped", "incomplete", "risky")


class LineRecognizer(ABC, Generic[RecordT]):
    """Recognize one informational line shape and parse it into a record."""

    @abstractmethod
    def is_match(self, text: str) -> bool:
        """Check if this recognizer handles the given line."""

    @abstractmethod
    def parse(self, text: str) -> RecordT:
        """Parse a line for which :meth:`is_match` returned True.

        Raises:
            MalformedLineError: If a required field is missing.
        """


class PatternRecognizer(LineRecognizer[RecordT]):
    """Recognizer driven by a single regular expression with named groups."""

    pattern: re.Pattern[str]
    required: tuple[str, ...] = ()

    def is_match(self, text: str) -> bool:
        return bool(self.pattern.search(text))

    def parse(self, text: str) -> RecordT:
        match = self.pattern.search(text)
        if match is None:
            raise MalformedLineError(text, f"{type(self).__name__} does not match")
        groups = match.groupdict()
        for name in self.required:
            if groups.get(name) is None:
                raise MalformedLineError(text, f"missing {name}")
        return self.build(groups, text)

    @abstractmethod
    def build(self, groups: dict[str, str | None], text: str) -> RecordT:
        """Create the record from the matched groups."""


class VersionRecognizer(PatternRecognizer[VersionInfo]):
    pattern = re.compile(
        r"^(ParaTest\s(v)?(?P<paratest>[\d.]+).+)?PHPUnit\s(?P<phpunit>[\d.]+)",
        re.IGNORECASE,
    )
    required = ("phpunit",)

    def build(self, groups: dict[str, str | None], text: str) -> VersionInfo:
        return VersionInfo(text=text, phpunit=groups["phpunit"], paratest=groups["paratest"])


class LabelValueRecognizer(PatternRecognizer[RecordT]):
    """``<Label>: <value>`` lines, matched case-insensitively."""

    label: str

    def __init__(self) -> None:
        self.field = self.label.lower()
        self.pattern = re.compile(rf"^{self.label}:\s+(?P<{self.field}>.+)", re.IGNORECASE)
        self.required = (self.field,)


class RuntimeRecognizer(LabelValueRecognizer[RuntimeInfo]):
    label = "Runtime"

    def build(self, groups: dict[str, str | None], text: str) -> RuntimeInfo:
        return RuntimeInfo(text=text, runtime=groups["runtime"])


class ConfigurationRecognizer(LabelValueRecognizer[ConfigurationInfo]):
    label = "Configuration"

    def build(self, groups: dict[str, str | None], text: str) -> ConfigurationInfo:
        return ConfigurationInfo(text=text, configuration=groups["configuration"])


class ProcessesRecognizer(LabelValueRecognizer[ProcessesInfo]):
    label = "Processes"

    def build(self, groups: dict[str, str | None], text: str) -> ProcessesInfo:
        return ProcessesInfo(text=text, processes=groups["processes"])


class TimingRecognizer(PatternRecognizer[TimingInfo]):
    pattern = re.compile(
        r"Time:\s(?P<time>[\d+:.]+(\s\w+)?),\sMemory:\s(?P<memory>[\d.]+\s\w+)"
    )
    required = ("time", "memory")

    def build(self, groups: dict[str, str | None], text: str) -> TimingInfo:
        return TimingInfo(text=text, time=groups["time"], memory=groups["memory"])


class SummaryRecognizer(LineRecognizer[SummaryInfo]):
    """Both the terse ``OK (...)`` and the verbose ``Tests: ...`` summaries.

    Only counters present in the line end up in the record.
    """

    _end = r"\s(\d+)[.\s,]\s?"
    _items = ("Error(s)?", "Failure(s)?", "Skipped", "Incomplete", "Risky")
    pattern = re.compile(
        rf"^OK\s+\(\d+\stest(s)?"
        rf"|^Test(s)?:{_end}Assertions:{_end}(({'|'.join(_items)}):{_end})*",
        re.IGNORECASE,
    )
    _counter = re.compile(
        r"((?P<name>\w+(?: \w+)?):\s(?P<count>\d+)|(?P<count2>\d+)\s(?P<name2>\w+))[.s,]?",
        re.IGNORECASE,
    )

    def is_match(self, text: str) -> bool:
        return bool(self.pattern.search(text))

    def parse(self, text: str) -> SummaryInfo:
        counts: dict[str, int] = {}
        for match in self._counter.finditer(text):
            if match.group("name"):
                name, count = match.group("name"), match.group("count")
            else:
                name, count = match.group("name2"), match.group("count2")
            counts[normalize_counter(name)] = int(count)

        if not counts:
            raise MalformedLineError(text, "summary without counters")

        summary = SummaryInfo(text=text)
        for name, count in counts.items():
            if name in SUMMARY_FIELDS:
                setattr(summary, name, count)
            else:
                summary.extra[name] = count
        return summary


def normalize_counter(name: str) -> str:
    """Lowercase a counter name and pluralize it (``Failure`` -> ``failures``).

    Multi-word names are joined with underscores
    (``PHPUnit Deprecations`` -> ``phpunit_deprecations``).
    """
    name = "_".join(name.lower().split())
    if name in _UNCOUNTED or name.endswith("s"):
        return name
    return f"{name}s"


def default_recognizers() -> list[LineRecognizer]:
    """Create the recognizers in the order they are tried."""
    return [
        VersionRecognizer(),
        RuntimeRecognizer(),
        ConfigurationRecognizer(),
        ProcessesRecognizer(),
        TimingRecognizer(),
        SummaryRecognizer(),
    ]
