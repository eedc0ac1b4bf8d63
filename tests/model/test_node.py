"""Tests for ComparisonNode.

Verifies:
- Equality requires equal paths and identical (not merely equal) values
- Hashing is identity based and works for unhashable values
- same_pair() ignores the path
- child() and rewrap() derive paths correctly
- Null and container shape queries
"""

from __future__ import annotations

from dataclasses import dataclass

from object_deep_diff.model.node import ComparisonNode
from object_deep_diff.model.path import FieldPath


@dataclass
class Person:
    name: str


class TestEquality:
    def test_same_path_same_objects_are_equal(self) -> None:
        a, e = [1], [1]
        assert ComparisonNode.root(a, e) == ComparisonNode.root(a, e)

    def test_equal_but_distinct_values_are_not_equal(self) -> None:
        assert ComparisonNode.root([1], [1]) != ComparisonNode.root([1], [1])

    def test_different_paths_are_not_equal(self) -> None:
        a, e = [1], [1]
        left = ComparisonNode(FieldPath(("x",)), a, e)
        right = ComparisonNode(FieldPath(("y",)), a, e)
        assert left != right

    def test_unhashable_values_can_be_set_members(self) -> None:
        a, e = {"k": [1]}, {"k": [1]}
        nodes = {ComparisonNode.root(a, e), ComparisonNode.root(a, e)}
        assert len(nodes) == 1

    def test_hash_ignores_contents(self) -> None:
        a, e = [1], [2]
        node = ComparisonNode.root(a, e)
        before = hash(node)
        a.append(3)
        assert hash(node) == before

    def test_not_equal_to_other_types(self) -> None:
        assert ComparisonNode.root(1, 1) != (FieldPath.root(), 1, 1)


class TestSamePair:
    def test_same_pair_ignores_path(self) -> None:
        a, e = Person("x"), Person("x")
        left = ComparisonNode(FieldPath(("neighbour",)), a, e)
        right = ComparisonNode(FieldPath(("neighbour", "neighbour", "neighbour")), a, e)
        assert left.same_pair(right)
        assert left != right

    def test_same_pair_requires_identity(self) -> None:
        left = ComparisonNode.root(Person("x"), Person("x"))
        right = ComparisonNode.root(Person("x"), Person("x"))
        assert not left.same_pair(right)

    def test_pair_key_is_identity_pair(self) -> None:
        a, e = [1], [2]
        assert ComparisonNode.root(a, e).pair_key == (id(a), id(e))


class TestDerivation:
    def test_child_extends_path(self) -> None:
        node = ComparisonNode.root({}, {}).child("name", "a", "b")
        assert node.path == FieldPath(("name",))
        assert node.actual == "a"
        assert node.expected == "b"

    def test_child_with_index(self) -> None:
        node = ComparisonNode.root([], []).child(0, 1, 2)
        assert node.path.render() == "[0]"

    def test_rewrap_keeps_path(self) -> None:
        node = ComparisonNode(FieldPath(("opt",)), "wrapped", "wrapped")
        inner = node.rewrap(5, 6)
        assert inner.path == node.path
        assert (inner.actual, inner.expected) == (5, 6)

    def test_field_name(self) -> None:
        node = ComparisonNode(FieldPath(("a", "b")), 1, 2)
        assert node.field_name == "b"


class TestShapeQueries:
    def test_both_null(self) -> None:
        node = ComparisonNode.root(None, None)
        assert node.is_both_null
        assert node.is_either_null

    def test_one_null(self) -> None:
        node = ComparisonNode.root(None, 1)
        assert not node.is_both_null
        assert node.is_either_null

    def test_no_null(self) -> None:
        assert not ComparisonNode.root(1, 2).is_either_null

    def test_scalars_are_only_opaque_leaves(self) -> None:
        node = ComparisonNode.root(1, "x")
        assert node.has_only_opaque_leaf_values
        assert not node.has_container_on_either_side

    def test_list_counts_as_container(self) -> None:
        node = ComparisonNode.root(1, [1])
        assert node.has_container_on_either_side
        assert not node.has_only_opaque_leaf_values

    def test_user_object_counts_as_container(self) -> None:
        assert ComparisonNode.root(Person("a"), "a").has_container_on_either_side

    def test_cycle_capable_requires_both_sides(self) -> None:
        assert ComparisonNode.root([1], [2]).has_cycle_capable_values
        assert not ComparisonNode.root([1], 2).has_cycle_capable_values
