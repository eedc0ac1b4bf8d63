"""Type classifier: decides how the traversal engine treats a single value.

Every value maps to exactly one ``ValueKind`` (the recursion shape) plus a
``Capability`` flag set describing it in more detail.  The dispatch order is
fixed because several predicates overlap (a mapping is also iterable, an
atomic array is also iterable, ``str`` is a sequence):

1.  ``None``                                  -> NULL
2.  ``enum.Enum`` members                     -> ENUM
3.  optional wrappers                         -> OPTIONAL
4.  atomic boxes / atomic arrays              -> ATOMIC / ATOMIC_ARRAY
5.  ``array.array`` / ``numpy.ndarray``       -> ARRAY
6.  ``Mapping``                               -> MAP
7.  sequences, sorted and indexed sets        -> ORDERED_COLLECTION
8.  other re-iterable containers              -> UNORDERED_ITERABLE
9.  builtin / stdlib / numpy scalar types     -> LEAF
10. everything else                           -> OBJECT

Classification depends only on the concrete type (except for ``None``), so
results are memoized per type in an LRU cache.
"""

from __future__ import annotations

import array
import enum
import pathlib
import sys
import threading
from collections.abc import Iterable, Iterator, Mapping, Sequence, Set
from dataclasses import dataclass
from enum import Flag, StrEnum, auto
from typing import Any

import numpy as np
from cachetools import LRUCache, cached

from object_deep_diff.boxes import (
    AtomicBoolean,
    AtomicInteger,
    AtomicIntegerArray,
    AtomicLong,
    AtomicLongArray,
    AtomicReference,
    AtomicReferenceArray,
    OptionalDouble,
    OptionalInt,
    OptionalLong,
    OptionalValue,
)
from object_deep_diff.protocols import IndexedSetLike, SortedMapping, SortedSetLike

__all__ = ["Capability", "Classification", "ValueKind", "classify", "is_cycle_capable"]


class ValueKind(StrEnum):
    """The single recursion shape chosen for a value.

    - NULL:               ``None``.
    - LEAF:               opaque value compared with ``==``.
    - ENUM:               enum member, compared as a leaf.
    - OPTIONAL:           zero-or-one wrapper, unwrapped in place.
    - ATOMIC:             lock-guarded box, unwrapped in place.
    - ATOMIC_ARRAY:       lock-guarded fixed array, compared by index.
    - ARRAY:              typed array, compared by index.
    - MAP:                mapping, compared by key.
    - ORDERED_COLLECTION: compared by position.
    - UNORDERED_ITERABLE: compared as a multiset.
    - OBJECT:             compared attribute by attribute.
    """

    NULL = auto()
    LEAF = auto()
    ENUM = auto()
    OPTIONAL = auto()
    ATOMIC = auto()
    ATOMIC_ARRAY = auto()
    ARRAY = auto()
    MAP = auto()
    ORDERED_COLLECTION = auto()
    UNORDERED_ITERABLE = auto()
    OBJECT = auto()

    @property
    def family(self) -> ValueKind:
        """Kinds sharing a decomposition strategy; shapes match within a family."""
        return ValueKind.LEAF if self is ValueKind.ENUM else self

    @property
    def is_container(self) -> bool:
        return self not in _NON_CONTAINER_KINDS


_NON_CONTAINER_KINDS = frozenset({ValueKind.NULL, ValueKind.LEAF, ValueKind.ENUM})


class Capability(Flag):
    """Closed set of structural capability tags a value can carry."""

    NULL = auto()
    OPAQUE_LEAF = auto()
    ENUM = auto()
    ARRAY = auto()
    MAP = auto()
    SORTED_MAP = auto()
    ORDERED_COLLECTION = auto()
    UNORDERED_ITERABLE = auto()
    OPTIONAL = auto()
    OPTIONAL_INT = auto()
    OPTIONAL_LONG = auto()
    OPTIONAL_DOUBLE = auto()
    ATOMIC_REFERENCE = auto()
    ATOMIC_REFERENCE_ARRAY = auto()
    ATOMIC_INTEGER = auto()
    ATOMIC_INTEGER_ARRAY = auto()
    ATOMIC_LONG = auto()
    ATOMIC_LONG_ARRAY = auto()
    ATOMIC_BOOLEAN = auto()
    OBJECT = auto()
    CYCLE_CAPABLE = auto()


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying one value."""

    kind: ValueKind
    capabilities: Capability

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def is_cycle_capable(self) -> bool:
        return Capability.CYCLE_CAPABLE in self.capabilities


_NULL = Classification(ValueKind.NULL, Capability.NULL)

# Most specific subclass first: OptionalInt is an OptionalValue, AtomicLong an
# AtomicInteger, and so on.
_OPTIONAL_TAGS: tuple[tuple[type, Capability], ...] = (
    (OptionalInt, Capability.OPTIONAL | Capability.OPTIONAL_INT),
    (OptionalLong, Capability.OPTIONAL | Capability.OPTIONAL_LONG),
    (OptionalDouble, Capability.OPTIONAL | Capability.OPTIONAL_DOUBLE),
    (OptionalValue, Capability.OPTIONAL),
)
_ATOMIC_TAGS: tuple[tuple[type, Capability], ...] = (
    (AtomicBoolean, Capability.ATOMIC_BOOLEAN),
    (AtomicLong, Capability.ATOMIC_LONG),
    (AtomicInteger, Capability.ATOMIC_INTEGER),
    (AtomicReference, Capability.ATOMIC_REFERENCE),
)
_ATOMIC_ARRAY_TAGS: tuple[tuple[type, Capability], ...] = (
    (AtomicLongArray, Capability.ATOMIC_LONG_ARRAY),
    (AtomicIntegerArray, Capability.ATOMIC_INTEGER_ARRAY),
    (AtomicReferenceArray, Capability.ATOMIC_REFERENCE_ARRAY),
)

# Iterable, but decomposing them either makes no sense or never terminates:
# a one-character string iterates to itself.
_NEVER_ITERATED: tuple[type, ...] = (str, bytes, bytearray, memoryview, pathlib.PurePath)

_STDLIB_MODULES = frozenset(sys.stdlib_module_names) | {"builtins"}


def _tag(cls: type, table: tuple[tuple[type, Capability], ...]) -> Capability | None:
    for base, capability in table:
        if issubclass(cls, base):
            return capability
    return None


def _is_base_runtime_type(cls: type) -> bool:
    """True for types defined by the interpreter, the stdlib, or numpy scalars."""
    if issubclass(cls, np.generic):
        return True
    module = getattr(cls, "__module__", None) or ""
    return module.partition(".")[0] in _STDLIB_MODULES


def _is_iterable(cls: type) -> bool:
    if issubclass(cls, _NEVER_ITERATED):
        return False
    # one-shot iterators would be consumed by the comparison itself
    if issubclass(cls, Iterator):
        return False
    return issubclass(cls, Iterable)


def _classify_shape(cls: type) -> tuple[ValueKind, Capability]:
    if issubclass(cls, enum.Enum):
        return ValueKind.ENUM, Capability.ENUM

    tag = _tag(cls, _OPTIONAL_TAGS)
    if tag is not None:
        return ValueKind.OPTIONAL, tag

    tag = _tag(cls, _ATOMIC_TAGS)
    if tag is not None:
        return ValueKind.ATOMIC, tag

    tag = _tag(cls, _ATOMIC_ARRAY_TAGS)
    if tag is not None:
        return ValueKind.ATOMIC_ARRAY, tag

    if issubclass(cls, (array.array, np.ndarray)):
        return ValueKind.ARRAY, Capability.ARRAY

    if issubclass(cls, Mapping):
        if issubclass(cls, SortedMapping):
            return ValueKind.MAP, Capability.MAP | Capability.SORTED_MAP
        return ValueKind.MAP, Capability.MAP

    if issubclass(cls, Sequence) and not issubclass(cls, _NEVER_ITERATED):
        return ValueKind.ORDERED_COLLECTION, Capability.ORDERED_COLLECTION
    if issubclass(cls, Set) and issubclass(cls, (SortedSetLike, IndexedSetLike)):
        return ValueKind.ORDERED_COLLECTION, Capability.ORDERED_COLLECTION

    if _is_iterable(cls):
        return ValueKind.UNORDERED_ITERABLE, Capability.UNORDERED_ITERABLE

    if _is_base_runtime_type(cls):
        return ValueKind.LEAF, Capability.OPAQUE_LEAF

    return ValueKind.OBJECT, Capability.OBJECT


# shared by concurrent comparisons
@cached(cache=LRUCache(maxsize=1024), lock=threading.Lock())
def _classify_type(cls: type) -> Classification:
    kind, capabilities = _classify_shape(cls)
    if kind.is_container:
        capabilities |= Capability.CYCLE_CAPABLE
    return Classification(kind, capabilities)


def classify(value: Any) -> Classification:
    """Classify ``value`` for recursive comparison.

    Args:
        value: Any Python value.

    Returns:
        The ``Classification`` of the value's concrete type.
    """
    if value is None:
        return _NULL
    return _classify_type(type(value))


def is_cycle_capable(value: Any) -> bool:
    """True unless ``value`` is ``None``, an enum member, or an opaque leaf."""
    return classify(value).is_cycle_capable
