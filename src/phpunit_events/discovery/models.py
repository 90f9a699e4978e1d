"""Test descriptors produced by source discovery.

Discovery itself (parsing PHP source) lives outside this package; these
types are the contract it fills in. A class descriptor holds its test
methods in ``children``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

ANNOTATION_NAMES = ("depends", "dataProvider", "testdox")

_ANNOTATION_PATTERN = re.compile(
    "|".join(rf"@{name}\s+(?P<{name}>[^\n]+)" for name in ANNOTATION_NAMES)
)


@dataclass(frozen=True)
class Position:
    """A 1-based line and 0-based character offset in a source file."""

    line: int
    character: int


@dataclass
class Annotations:
    """Relationships declared on a test through docblocks or attributes."""

    depends: list[str] = field(default_factory=list)
    data_provider: list[str] = field(default_factory=list)
    testdox: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        """Serialize to dictionary, leaving out empty annotations."""
        data = {
            "depends": self.depends,
            "dataProvider": self.data_provider,
            "testdox": self.testdox,
        }
        return {name: values for name, values in data.items() if values}


@dataclass
class TestDescriptor:
    """A test class or test method found in a source file."""

    __test__ = False

    id: str
    file: str
    qualified_class: str
    namespace: str
    start: Position
    end: Position
    class_name: str | None = None
    method: str | None = None
    annotations: Annotations = field(default_factory=Annotations)
    children: list[TestDescriptor] = field(default_factory=list)

    @property
    def is_method(self) -> bool:
        return self.method is not None

    def walk(self):
        """Yield this descriptor and all of its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()


def qualified_class(namespace: str | None = None, class_name: str | None = None) -> str:
    """Join namespace and class with a backslash, skipping empty parts."""
    return "\\".join(name for name in (namespace, class_name) if name)


def unique_id(
    namespace: str | None = None,
    class_name: str | None = None,
    method: str | None = None,
) -> str | None:
    """Build the identifier PHPUnit uses in location hints.

    ``Ns\\FooTest::test_bar`` for a method, ``Ns\\FooTest`` for a class and
    the bare namespace when there is no class.
    """
    if not class_name:
        return namespace
    identifier = qualified_class(namespace, class_name)
    if method:
        identifier = f"{identifier}::{method}"
    return identifier


def parse_annotations(doc_comment: str) -> Annotations:
    """Collect ``@depends``, ``@dataProvider`` and ``@testdox`` from a docblock.

    Repeated annotations accumulate in source order.
    """
    annotations = Annotations()
    targets = {
        "depends": annotations.depends,
        "dataProvider": annotations.data_provider,
        "testdox": annotations.testdox,
    }
    for match in _ANNOTATION_PATTERN.finditer(doc_comment):
        for name, value in match.groupdict().items():
            if value:
                targets[name].append(value.strip().removesuffix("*/").strip())
    return annotations
