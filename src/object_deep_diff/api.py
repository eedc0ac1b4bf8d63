"""Public API functions for object-deep-diff.

This module provides the three user-facing functions: compare,
find_differences and is_equivalent.  Each call creates a fresh
RecursiveComparator to guarantee zero shared state between calls.
"""

from __future__ import annotations

from typing import Any

from object_deep_diff.algorithm.config import ComparisonPolicy
from object_deep_diff.comparator import RecursiveComparator
from object_deep_diff.result import ComparisonResult, Difference

__all__ = ["compare", "find_differences", "is_equivalent"]


def compare(
    actual: Any,
    expected: Any,
    policy: ComparisonPolicy | None = None,
) -> ComparisonResult:
    """Compare two values and return a rich ComparisonResult.

    Args:
        actual:   The value produced by the code under test.
        expected: The reference value.
        policy:   Ignore rules and comparator overrides.  Defaults to
                  ``ComparisonPolicy()`` when None.

    Returns:
        A ``ComparisonResult`` with differences, node and cycle counters and
        computation_time_ms populated.
    """
    return RecursiveComparator(policy).compare(actual, expected)


def find_differences(
    actual: Any,
    expected: Any,
    policy: ComparisonPolicy | None = None,
) -> list[Difference]:
    """Return only the differences, in discovery order."""
    return list(compare(actual, expected, policy=policy).differences)


def is_equivalent(
    actual: Any,
    expected: Any,
    policy: ComparisonPolicy | None = None,
) -> bool:
    """Return True if the two values are structurally equal under ``policy``."""
    return compare(actual, expected, policy=policy).is_equal
