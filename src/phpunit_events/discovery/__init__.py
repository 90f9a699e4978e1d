"""Contract for the test-discovery collaborator."""

from .index import DescriptorIndex
from .models import (
    Annotations,
    Position,
    TestDescriptor,
    parse_annotations,
    qualified_class,
    unique_id,
)

__all__ = [
    "Annotations",
    "DescriptorIndex",
    "Position",
    "TestDescriptor",
    "parse_annotations",
    "qualified_class",
    "unique_id",
]
