"""Resolve decoded test results back to discovered descriptors."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from phpunit_events.core.models import TestResult
    from phpunit_events.discovery.models import TestDescriptor


class DescriptorIndex:
    """Look up descriptors by the identifier carried in location hints."""

    def __init__(self, descriptors: Iterable[TestDescriptor] = ()) -> None:
        self._by_id: dict[str, TestDescriptor] = {}
        for descriptor in descriptors:
            self.add(descriptor)

    def add(self, descriptor: TestDescriptor) -> None:
        """Index a descriptor tree; later files replace earlier ids."""
        for node in descriptor.walk():
            self._by_id[node.id] = node

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, test_id: object) -> bool:
        return test_id in self._by_id

    def get(self, test_id: str) -> TestDescriptor | None:
        return self._by_id.get(test_id)

    def resolve(self, result: TestResult) -> TestDescriptor | None:
        """Find the descriptor for a result.

        ``test_id`` is tried first so every data-set invocation maps to the
        same method, then ``id``.
        """
        for candidate in (result.test_id, result.id):
            if candidate and candidate in self._by_id:
                return self._by_id[candidate]
        return None
