"""Traversal: iterative lock-step walk over two object graphs.

One ``Traversal`` is one comparison run.  It owns a FIFO work queue of
``ComparisonNode``s, an identity map of value pairs already being compared,
and the list of differences found so far.  Nothing is shared between runs.

Per dequeued node:

1. Ignored paths/types are skipped outright.
2. A registered field or type comparator replaces the default decision.
3. ``None`` on both sides passes; on one side it is a missing value.
4. Pairs of cycle-capable values already in the visited map are skipped;
   otherwise the pair is recorded before descending.
5. Sides that classify into different kind families are a shape mismatch
   (as is any concrete type difference under strict type checking).
6. Containers are decomposed into child nodes; extra or missing entries are
   recorded directly.  Leaves are compared with ``==``.

The walk never recurses on the call stack, so depth is bounded by memory
and cyclic graphs always terminate.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import ChainMap, deque
from collections.abc import Hashable, Mapping, MutableMapping, Sized
from typing import Any

import numpy as np

from object_deep_diff.algorithm.classifier import Capability, Classification, ValueKind, classify
from object_deep_diff.algorithm.config import ResolvedPolicy
from object_deep_diff.algorithm.matcher import build_cost_matrix, pair_elements
from object_deep_diff.boxes import OptionalValue
from object_deep_diff.model.node import ComparisonNode, PairKey
from object_deep_diff.model.path import FieldPath
from object_deep_diff.result import Difference, DifferenceKind

__all__ = ["Traversal"]

logger = logging.getLogger(__name__)

_ABSENT: Any = object()


class Traversal:
    """Work-queue driven comparison of two value graphs.

    Example::

        from object_deep_diff.algorithm.config import ComparisonPolicy
        from object_deep_diff.algorithm.traversal import Traversal

        traversal = Traversal(ComparisonPolicy().resolve())
        diffs = traversal.run({"a": 1, "b": 2}, {"a": 1})
        # [Difference(path=FieldPath(('b',)), actual=2, expected=None,
        #             kind=DifferenceKind.MISSING_ON_EXPECTED)]
    """

    def __init__(
        self,
        policy: ResolvedPolicy,
        visited: Mapping[PairKey, tuple[Any, Any]] | None = None,
    ) -> None:
        """Initialise an empty run.

        Args:
            policy:  Resolved comparison policy.
            visited: Pairs already being compared by an enclosing run.  They
                are layered under this run's own map and never mutated, so
                nested runs used for element pairing stay bounded on cyclic
                graphs.
        """
        self._policy = policy
        self._queue: deque[ComparisonNode] = deque()
        # id pair -> the pair itself; holding the values keeps ids from being reused
        self._visited: MutableMapping[PairKey, tuple[Any, Any]] = (
            ChainMap({}, visited) if visited else {}  # type: ignore[arg-type]
        )
        self._differences: list[Difference] = []
        self.nodes_compared = 0
        self.cycles_skipped = 0

    @property
    def differences(self) -> list[Difference]:
        return list(self._differences)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self, actual: Any, expected: Any, path: FieldPath | None = None) -> list[Difference]:
        """Compare two values and return the differences in discovery order.

        Args:
            actual:   Actual value.
            expected: Expected value.
            path:     Location of the pair, the root path by default.  Nested
                runs used for element pairing pass the element's path so
                path-based ignore rules and comparators still apply.
        """
        self._queue.append(ComparisonNode(path or FieldPath.root(), actual, expected))
        while self._queue:
            node = self._queue.popleft()
            self.nodes_compared += 1
            self._process(node)
        return self.differences

    def _process(self, node: ComparisonNode) -> None:
        policy = self._policy
        actual, expected = node.actual, node.expected

        if policy.is_ignored(node.path, actual, expected):
            return

        comparator = policy.comparator_for(node.path, actual, expected)
        if comparator is not None:
            if not comparator(actual, expected):
                self._record(node, DifferenceKind.VALUE_MISMATCH)
            return

        if node.is_both_null:
            return
        if node.is_either_null:
            self._compare_with_null(node)
            return

        actual_class = classify(actual)
        expected_class = classify(expected)

        if actual_class.is_cycle_capable and expected_class.is_cycle_capable:
            key = node.pair_key
            if key in self._visited:
                self.cycles_skipped += 1
                logger.debug("Already comparing this pair, skipping %r", node.path.render())
                return
            self._visited[key] = (actual, expected)

        kind = actual_class.kind.family
        if kind is not expected_class.kind.family:
            self._record(node, DifferenceKind.SHAPE_MISMATCH)
            return
        if policy.strict_type_checking and type(actual) is not type(expected):
            self._record(node, DifferenceKind.SHAPE_MISMATCH)
            return

        if kind is ValueKind.LEAF:
            self._compare_leaves(node)
        elif kind is ValueKind.OPTIONAL:
            self._compare_optionals(node)
        elif kind is ValueKind.ATOMIC:
            self._enqueue(node.rewrap(actual.get(), expected.get()))
        elif kind is ValueKind.ATOMIC_ARRAY:
            self._compare_by_index(node, actual.snapshot(), expected.snapshot())
        elif kind is ValueKind.ARRAY:
            self._compare_arrays(node)
        elif kind is ValueKind.MAP:
            self._compare_maps(node, actual_class, expected_class)
        elif kind is ValueKind.ORDERED_COLLECTION:
            self._compare_by_index(node, list(actual), list(expected))
        elif kind is ValueKind.UNORDERED_ITERABLE:
            self._compare_unordered(node)
        else:
            self._compare_objects(node)

    # ------------------------------------------------------------------
    # Recording helpers
    # ------------------------------------------------------------------

    def _enqueue(self, node: ComparisonNode) -> None:
        self._queue.append(node)

    def _record(self, node: ComparisonNode, kind: DifferenceKind) -> None:
        self._record_at(node.path, node.actual, node.expected, kind)

    def _record_at(self, path: FieldPath, actual: Any, expected: Any, kind: DifferenceKind) -> None:
        self._differences.append(Difference(path, actual, expected, kind))

    def _record_missing(self, path: FieldPath, actual: Any, expected: Any, kind: DifferenceKind) -> None:
        """Record an entry present on one side only, unless its path is ignored."""
        if not self._policy.is_ignored(path, actual, expected):
            self._record_at(path, actual, expected, kind)

    # ------------------------------------------------------------------
    # Terminal comparisons
    # ------------------------------------------------------------------

    def _compare_with_null(self, node: ComparisonNode) -> None:
        present = node.expected if node.actual is None else node.actual
        if not self._policy.treat_null_as_distinct_from_empty and _is_empty(present):
            return
        if node.actual is None:
            self._record(node, DifferenceKind.MISSING_ON_ACTUAL)
        else:
            self._record(node, DifferenceKind.MISSING_ON_EXPECTED)

    def _compare_leaves(self, node: ComparisonNode) -> None:
        if not _leaf_equal(node.actual, node.expected):
            self._record(node, DifferenceKind.VALUE_MISMATCH)

    # ------------------------------------------------------------------
    # Decomposition
    # ------------------------------------------------------------------

    def _compare_optionals(self, node: ComparisonNode) -> None:
        actual: OptionalValue[Any] = node.actual
        expected: OptionalValue[Any] = node.expected
        actual_present, expected_present = actual.is_present(), expected.is_present()
        if actual_present and expected_present:
            self._enqueue(node.rewrap(actual.get(), expected.get()))
        elif actual_present:
            self._record(node, DifferenceKind.MISSING_ON_EXPECTED)
        elif expected_present:
            self._record(node, DifferenceKind.MISSING_ON_ACTUAL)

    def _compare_by_index(self, node: ComparisonNode, actual: list[Any], expected: list[Any]) -> None:
        if len(actual) != len(expected):
            self._record(node, DifferenceKind.SIZE_MISMATCH)
            return
        for index, (a, e) in enumerate(zip(actual, expected, strict=True)):
            self._enqueue(node.child(index, a, e))

    def _compare_arrays(self, node: ComparisonNode) -> None:
        actual, expected = node.actual, node.expected
        actual_shape, expected_shape = _array_shape(actual), _array_shape(expected)
        if actual_shape != expected_shape:
            self._record(node, DifferenceKind.SIZE_MISMATCH)
            return
        if not actual_shape:
            # 0-d numpy arrays hold a single scalar
            self._enqueue(node.rewrap(actual.item(), expected.item()))
            return
        self._compare_by_index(node, list(actual), list(expected))

    def _compare_maps(
        self,
        node: ComparisonNode,
        actual_class: Classification,
        expected_class: Classification,
    ) -> None:
        actual: Mapping[Any, Any] = node.actual
        expected: Mapping[Any, Any] = node.expected

        shared: list[Any] = []
        for key in actual:
            if key in expected:
                shared.append(key)
            else:
                path = node.path.child(key)
                self._record_missing(path, actual[key], None, DifferenceKind.MISSING_ON_EXPECTED)
        for key in expected:
            if key not in actual:
                path = node.path.child(key)
                self._record_missing(path, None, expected[key], DifferenceKind.MISSING_ON_ACTUAL)

        if actual_class.has(Capability.SORTED_MAP) and expected_class.has(Capability.SORTED_MAP):
            expected_order = [key for key in expected if key in actual]
            if shared != expected_order:
                self._record(node, DifferenceKind.VALUE_MISMATCH)

        for key in shared:
            self._enqueue(node.child(key, actual[key], expected[key]))

    def _compare_unordered(self, node: ComparisonNode) -> None:
        actual, expected = list(node.actual), list(node.expected)
        if len(actual) != len(expected):
            self._record(node, DifferenceKind.SIZE_MISMATCH)
            return
        if not actual:
            return

        rows, cols = self._prematch(actual, expected)
        if rows:
            paths = {row: node.path.child(row) for row in rows}
            cost_matrix = build_cost_matrix(
                rows,
                [expected[col] for col in cols],
                lambda row, e: self._pair_cost(paths[row], actual[row], e),
            )
            for i, j, cost in pair_elements(cost_matrix):
                if cost:
                    row = rows[i]
                    self._enqueue(node.child(row, actual[row], expected[cols[j]]))
        logger.debug(
            "Paired %d unordered elements at %r, %d left for cost matching",
            len(actual),
            node.path.render(),
            len(rows),
        )

    def _prematch(self, actual: list[Any], expected: list[Any]) -> tuple[list[int], list[int]]:
        """Pair off elements that are known to compare equal without a sub-traversal.

        Identical objects pair first, then same-type hashable leaves that are
        ``==``.  Comparators can turn an equal pair into a difference, so
        nothing is pre-matched while any are registered.  Returns the
        unmatched actual and expected indices, each in ascending order.
        """
        if self._policy.field_comparators or self._policy.type_comparators:
            return list(range(len(actual))), list(range(len(expected)))

        free_expected = set(range(len(expected)))
        by_identity: dict[int, list[int]] = {}
        for col, value in enumerate(expected):
            by_identity.setdefault(id(value), []).append(col)
        by_value: dict[tuple[type, Any], list[int]] = {}
        for col, value in enumerate(expected):
            if classify(value).kind.family is ValueKind.LEAF and _is_hashable(value):
                by_value.setdefault((type(value), value), []).append(col)

        rows: list[int] = []
        for row, value in enumerate(actual):
            col = _take_free(by_identity.get(id(value)), free_expected)
            if col is None and classify(value).kind.family is ValueKind.LEAF and _is_hashable(value):
                col = _take_free(by_value.get((type(value), value)), free_expected)
            if col is None:
                rows.append(row)
            else:
                free_expected.discard(col)
        return rows, sorted(free_expected)

    def _pair_cost(self, path: FieldPath, actual: Any, expected: Any) -> int:
        return len(Traversal(self._policy, visited=self._visited).run(actual, expected, path))

    def _compare_objects(self, node: ComparisonNode) -> None:
        actual_fields = _declared_fields(node.actual)
        expected_fields = _declared_fields(node.expected)
        if not actual_fields and not expected_fields:
            # nothing to decompose (object(), C extension types, ...)
            self._compare_leaves(node)
            return

        for name, value in actual_fields.items():
            if name in expected_fields:
                self._enqueue(node.child(name, value, expected_fields[name]))
            else:
                self._record_missing(node.path.child(name), value, None, DifferenceKind.MISSING_ON_EXPECTED)
        for name, value in expected_fields.items():
            if name not in actual_fields:
                self._record_missing(node.path.child(name), None, value, DifferenceKind.MISSING_ON_ACTUAL)


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------


def _leaf_equal(actual: Any, expected: Any) -> bool:
    if actual is expected:
        return True
    try:
        if actual == expected:
            return True
    except (TypeError, ValueError, ArithmeticError) as exc:
        logger.warning(
            "Equality check between %s and %s raised %r; treating as different",
            type(actual).__name__,
            type(expected).__name__,
            exc,
        )
        return False
    # NaN-like values (float/complex NaN, Decimal NaN, NaT) never equal themselves
    return _is_self_unequal(actual) and _is_self_unequal(expected)


def _is_self_unequal(value: Any) -> bool:
    try:
        return bool(value != value)
    except (TypeError, ValueError, ArithmeticError):
        return False


def _is_hashable(value: Any) -> bool:
    if not isinstance(value, Hashable):
        return False
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _take_free(candidates: list[int] | None, free: set[int]) -> int | None:
    """First index in ``candidates`` still in ``free``, dropping used ones."""
    while candidates:
        index = candidates.pop(0)
        if index in free:
            return index
    return None


def _is_empty(value: Any) -> bool:
    if isinstance(value, OptionalValue):
        return not value.is_present()
    if isinstance(value, np.ndarray):
        return value.size == 0
    return isinstance(value, Sized) and len(value) == 0


def _array_shape(value: Any) -> tuple[int, ...]:
    if isinstance(value, np.ndarray):
        return value.shape
    return (len(value),)


def _declared_fields(value: Any) -> dict[str, Any]:
    """Attribute name -> value for everything that makes up ``value``'s state.

    Dataclass fields come first in declaration order, then remaining instance
    ``__dict__`` entries, then any populated ``__slots__``.
    """
    fields: dict[str, Any] = {}
    if dataclasses.is_dataclass(value):
        for f in dataclasses.fields(value):
            attr = getattr(value, f.name, _ABSENT)
            if attr is not _ABSENT:
                fields[f.name] = attr

    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, Mapping):
        for name, attr in instance_dict.items():
            fields.setdefault(name, attr)

    for cls in type(value).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{cls.__name__.lstrip('_')}{name}"
            if name in fields:
                continue
            attr = getattr(value, name, _ABSENT)
            if attr is not _ABSENT:
                fields[name] = attr
    return fields
