"""Tests for the discovery contract helpers."""

from __future__ import annotations

import pytest

from phpunit_events.core.models import TestResult, TestResultEvent
from phpunit_events.discovery import (
    Annotations,
    DescriptorIndex,
    Position,
    TestDescriptor,
    parse_annotations,
    qualified_class,
    unique_id,
)


def make_class(namespace: str, class_name: str, methods: list[str]) -> TestDescriptor:
    suite = TestDescriptor(
        id=unique_id(namespace, class_name),
        file=f"tests/{class_name}.php",
        qualified_class=qualified_class(namespace, class_name),
        namespace=namespace,
        class_name=class_name,
        start=Position(line=5, character=0),
        end=Position(line=40, character=1),
    )
    for offset, method in enumerate(methods):
        suite.children.append(
            TestDescriptor(
                id=unique_id(namespace, class_name, method),
                file=suite.file,
                qualified_class=suite.qualified_class,
                namespace=namespace,
                class_name=class_name,
                method=method,
                start=Position(line=10 + offset * 5, character=4),
                end=Position(line=13 + offset * 5, character=5),
            )
        )
    return suite


class TestIdentity:
    """Tests for unique_id and qualified_class."""

    @pytest.mark.parametrize(
        "namespace,class_name,method,expected",
        [
            ("App\\Tests", "FooTest", "test_bar", "App\\Tests\\FooTest::test_bar"),
            ("App\\Tests", "FooTest", None, "App\\Tests\\FooTest"),
            ("", "FooTest", "test_bar", "FooTest::test_bar"),
            ("App\\Tests", None, None, "App\\Tests"),
        ],
    )
    def test_unique_id(self, namespace, class_name, method, expected):
        """Only the separators for present parts are used."""
        assert unique_id(namespace, class_name, method) == expected

    def test_qualified_class_without_namespace(self):
        """A class at the top level has no leading backslash."""
        assert qualified_class(None, "FooTest") == "FooTest"


class TestParseAnnotations:
    """Tests for docblock annotation parsing."""

    def test_all_annotations(self):
        """depends, dataProvider and testdox are collected in order."""
        doc = """/**
         * @depends test_passed
         * @dataProvider additionProvider
         * @depends test_other
         * @testdox has an initial balance of zero
         */"""

        annotations = parse_annotations(doc)

        assert annotations == Annotations(
            depends=["test_passed", "test_other"],
            data_provider=["additionProvider"],
            testdox=["has an initial balance of zero"],
        )

    def test_single_line_docblock(self):
        """The closing marker is not part of the value."""
        assert parse_annotations("/** @depends test_a */").depends == ["test_a"]

    def test_to_dict_skips_empty(self):
        """Annotations that were not declared are left out."""
        annotations = parse_annotations("/** @dataProvider rows */")

        assert annotations.to_dict() == {"dataProvider": ["rows"]}

    def test_plain_test_annotation_is_ignored(self):
        """@test marks a test but carries no relationship."""
        assert parse_annotations("/** @test */").to_dict() == {}


class TestDescriptorIndex:
    """Resolving decoded results to descriptors."""

    def test_resolve_by_test_id(self):
        """Every data-set invocation resolves to the method descriptor."""
        index = DescriptorIndex([make_class("App\\Tests", "MathTest", ["test_sum", "test_div"])])
        result = TestResult(
            event=TestResultEvent.TEST_FAILED,
            name="test_sum with data set #2",
            flow_id=1,
            id="App\\Tests\\MathTest::test_sum with data set #2",
            test_id="App\\Tests\\MathTest::test_sum",
        )

        descriptor = index.resolve(result)

        assert descriptor is not None
        assert descriptor.method == "test_sum"
        assert descriptor.is_method

    def test_resolve_suite_by_id(self):
        """Suite results resolve to the class descriptor."""
        index = DescriptorIndex([make_class("App\\Tests", "MathTest", ["test_sum"])])
        result = TestResult(
            event=TestResultEvent.TEST_SUITE_STARTED,
            name="App\\Tests\\MathTest",
            flow_id=1,
            id="App\\Tests\\MathTest",
        )

        assert index.resolve(result).class_name == "MathTest"

    def test_unknown_result(self):
        """Results without a location resolve to nothing."""
        index = DescriptorIndex([make_class("App", "ATest", ["test_a"])])
        result = TestResult(event=TestResultEvent.TEST_FINISHED, name="x", flow_id=1)

        assert index.resolve(result) is None
        assert len(index) == 2
        assert "App\\ATest::test_a" in index
