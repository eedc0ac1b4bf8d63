"""ComparisonNode: one unit of traversal work.

A node pairs a ``FieldPath`` with the actual and expected values found at that
path.  Node equality and hashing are identity based on the two values, so
nodes can sit in sets and dict keys even when the values are mutable or
unhashable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from object_deep_diff.algorithm.classifier import classify
from object_deep_diff.model.path import FieldPath

__all__ = ["ComparisonNode", "PairKey"]

# (id(actual), id(expected)): key of the identity map used for cycle detection
PairKey = tuple[int, int]


@dataclass(frozen=True, slots=True, eq=False)
class ComparisonNode:
    """Immutable (path, actual, expected) triple.

    Attributes:
        path:     Location of the pair relative to the comparison root.
        actual:   Value found on the actual side.
        expected: Value found on the expected side.
    """

    path: FieldPath
    actual: Any
    expected: Any

    @classmethod
    def root(cls, actual: Any, expected: Any) -> ComparisonNode:
        return cls(FieldPath.root(), actual, expected)

    def child(self, segment: Any, actual: Any, expected: Any) -> ComparisonNode:
        """Node for a decomposed child, one segment below this node."""
        return ComparisonNode(self.path.child(segment), actual, expected)

    def rewrap(self, actual: Any, expected: Any) -> ComparisonNode:
        """Node at the same path holding unwrapped values (optionals, atomics)."""
        return ComparisonNode(self.path, actual, expected)

    # ------------------------------------------------------------------
    # Identity relations
    # ------------------------------------------------------------------

    @property
    def pair_key(self) -> PairKey:
        return (id(self.actual), id(self.expected))

    def same_pair(self, other: ComparisonNode) -> bool:
        """True when both nodes reference the identical values, ignoring path.

        This is the relation cycle detection relies on: ``root`` and
        ``root.neighbour.neighbour`` reference the same pair of objects in a
        mutual cycle even though their paths differ.
        """
        return self.actual is other.actual and self.expected is other.expected

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparisonNode):
            return NotImplemented
        return self.same_pair(other) and self.path == other.path

    def __hash__(self) -> int:
        return hash(self.pair_key)

    # ------------------------------------------------------------------
    # Shape queries
    # ------------------------------------------------------------------

    @property
    def field_name(self) -> str:
        return self.path.field_name

    @property
    def is_both_null(self) -> bool:
        return self.actual is None and self.expected is None

    @property
    def is_either_null(self) -> bool:
        return self.actual is None or self.expected is None

    @property
    def has_only_opaque_leaf_values(self) -> bool:
        """True when neither side would be decomposed any further."""
        return not self.has_container_on_either_side

    @property
    def has_container_on_either_side(self) -> bool:
        return classify(self.actual).kind.is_container or classify(self.expected).kind.is_container

    @property
    def has_cycle_capable_values(self) -> bool:
        return classify(self.actual).is_cycle_capable and classify(self.expected).is_cycle_capable

    def __repr__(self) -> str:
        return (
            f"ComparisonNode(path={self.path.render()!r}, "
            f"actual={self.actual!r}, expected={self.expected!r})"
        )
