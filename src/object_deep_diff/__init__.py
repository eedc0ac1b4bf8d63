"""Object deep diff - recursive structural comparison of Python object graphs."""

from __future__ import annotations

from object_deep_diff.algorithm.config import ComparisonPolicy, PolicyConfigurationError
from object_deep_diff.api import compare, find_differences, is_equivalent
from object_deep_diff.comparator import RecursiveComparator
from object_deep_diff.model.path import FieldPath
from object_deep_diff.result import ComparisonResult, Difference, DifferenceKind

__version__: str = "0.1.0"
__all__: list[str] = [
    "ComparisonPolicy",
    "ComparisonResult",
    "Difference",
    "DifferenceKind",
    "FieldPath",
    "PolicyConfigurationError",
    "RecursiveComparator",
    "compare",
    "find_differences",
    "is_equivalent",
]
