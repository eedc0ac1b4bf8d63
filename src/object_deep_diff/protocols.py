"""Structural protocols used by the type classifier.

Python has no standard sorted mapping or ordered set, so the classifier
recognises them structurally: any mapping exposing ``bisect_left`` and
``peekitem`` is treated as a sorted map, any set exposing ``bisect_left``
as a sorted set, and any set exposing ``index`` as an insertion-ordered set.
Third-party containers (``sortedcontainers.SortedDict``,
``ordered_set.OrderedSet``, ...) satisfy these protocols without this package
importing them.

Example::

    from object_deep_diff.protocols import SortedMapping

    class Ranked(dict):
        def bisect_left(self, key): ...
        def peekitem(self, index=-1): ...

    assert isinstance(Ranked(), SortedMapping)  # structural conformance
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SortedMapping(Protocol):
    """A mapping whose iteration order is defined by its keys' sort order."""

    def bisect_left(self, value: Any) -> int: ...

    def peekitem(self, index: int = -1) -> tuple[Any, Any]: ...


@runtime_checkable
class SortedSetLike(Protocol):
    """A set whose iteration order is defined by its elements' sort order."""

    def bisect_left(self, value: Any) -> int: ...


@runtime_checkable
class IndexedSetLike(Protocol):
    """A set that remembers insertion order and supports positional lookup."""

    def index(self, value: Any) -> int: ...

