"""Difference records and the ComparisonResult returned by compare() calls.

The engine produces data only; rendering differences into messages is left
to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from object_deep_diff.model.path import FieldPath

__all__ = ["ComparisonResult", "Difference", "DifferenceKind"]


class DifferenceKind(StrEnum):
    """Why a node was recorded as different.

    - VALUE_MISMATCH:      leaf values (or a comparator) disagree.
    - MISSING_ON_ACTUAL:   expected has a value/key/field that actual lacks.
    - MISSING_ON_EXPECTED: actual has a value/key/field that expected lacks.
    - SHAPE_MISMATCH:      the two sides classify into incompatible kinds.
    - SIZE_MISMATCH:       positional or multiset containers of different length.
    """

    VALUE_MISMATCH = auto()
    MISSING_ON_ACTUAL = auto()
    MISSING_ON_EXPECTED = auto()
    SHAPE_MISMATCH = auto()
    SIZE_MISMATCH = auto()


@dataclass(frozen=True, slots=True)
class Difference:
    """One divergence between the actual and expected graphs.

    Attributes:
        path:     Where the divergence was found.
        actual:   Actual value at ``path`` (``None`` when missing).
        expected: Expected value at ``path`` (``None`` when missing).
        kind:     Classification of the divergence.
    """

    path: FieldPath
    actual: Any
    expected: Any
    kind: DifferenceKind

    @property
    def rendered_path(self) -> str:
        return self.path.render()


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Rich result of a compare() call.

    Attributes:
        differences: Differences in discovery order.  Empty when the graphs
            are structurally equal under the policy in effect.
        nodes_compared: Number of nodes taken off the work queue.
        cycles_skipped: Number of nodes skipped because their value pair was
            already being compared.
        computation_time_ms: Wall-clock duration of the comparison in milliseconds.
    """

    differences: tuple[Difference, ...]
    nodes_compared: int
    cycles_skipped: int
    computation_time_ms: float

    @property
    def is_equal(self) -> bool:
        return not self.differences

    def paths(self) -> list[str]:
        """Rendered paths of all differences, in discovery order."""
        return [d.path.render() for d in self.differences]

    def of_kind(self, kind: DifferenceKind) -> list[Difference]:
        return [d for d in self.differences if d.kind == kind]
