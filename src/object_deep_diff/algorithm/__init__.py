"""algorithm subpackage: type classification, policy and element pairing.

The traversal engine itself lives in ``object_deep_diff.algorithm.traversal``
and is driven through ``RecursiveComparator``; it is not re-exported here so
that ``object_deep_diff.model`` can import the classifier without a cycle.

Example::

    from object_deep_diff.algorithm import ValueKind, classify

    classify([1, 2]).kind       # ValueKind.ORDERED_COLLECTION
    classify({1, 2}).kind       # ValueKind.UNORDERED_ITERABLE
"""

from __future__ import annotations

from object_deep_diff.algorithm.classifier import (
    Capability,
    Classification,
    ValueKind,
    classify,
    is_cycle_capable,
)
from object_deep_diff.algorithm.config import (
    ComparisonPolicy,
    PolicyConfigurationError,
    ResolvedPolicy,
)

__all__ = [
    "Capability",
    "Classification",
    "ComparisonPolicy",
    "PolicyConfigurationError",
    "ResolvedPolicy",
    "ValueKind",
    "classify",
    "is_cycle_capable",
]
