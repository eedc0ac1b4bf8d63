"""Optional and atomic wrapper types understood by the comparison engine.

Optional wrappers hold zero or one value; the engine unwraps present values
and reports presence mismatches at the wrapper's own path.  Atomic boxes are
small lock-guarded holders for a single value (or a fixed-length array of
values) that can be shared between threads; the engine unwraps them with
``get()`` / iterates them by index.

The ``*Int`` and ``*Long`` flavours restrict values to signed 32-bit and
64-bit integers respectively.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")

__all__ = [
    "AtomicBoolean",
    "AtomicInteger",
    "AtomicIntegerArray",
    "AtomicLong",
    "AtomicLongArray",
    "AtomicReference",
    "AtomicReferenceArray",
    "OptionalDouble",
    "OptionalInt",
    "OptionalLong",
    "OptionalValue",
]

_INT_BITS = 32
_LONG_BITS = 64


def _check_width(value: int, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"expected an int, got {type(value).__name__}"
        raise TypeError(msg)
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= value <= high:
        msg = f"{value} does not fit in a signed {bits}-bit integer"
        raise ValueError(msg)
    return value


# ---------------------------------------------------------------------------
# Optional wrappers
# ---------------------------------------------------------------------------

_MISSING: Any = object()


class OptionalValue(Generic[T]):
    """A container that either holds one value or is empty.

    ``None`` is a legal held value: ``OptionalValue.of(None)`` is present.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any = _MISSING) -> None:
        self._value = value

    @classmethod
    def of(cls, value: T) -> OptionalValue[T]:
        return cls(value)

    @classmethod
    def empty(cls) -> OptionalValue[T]:
        return cls()

    def is_present(self) -> bool:
        return self._value is not _MISSING

    def get(self) -> T:
        """Return the held value.

        Raises:
            LookupError: If the optional is empty.
        """
        if self._value is _MISSING:
            msg = f"{type(self).__name__} is empty"
            raise LookupError(msg)
        return self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value is other._value or self._value == other._value

    def __hash__(self) -> int:
        return hash((type(self), None if self._value is _MISSING else self._value))

    def __repr__(self) -> str:
        if self._value is _MISSING:
            return f"{type(self).__name__}.empty()"
        return f"{type(self).__name__}.of({self._value!r})"


class OptionalInt(OptionalValue[int]):
    """Optional holding a signed 32-bit integer."""

    __slots__ = ()

    def __init__(self, value: Any = _MISSING) -> None:
        super().__init__(value if value is _MISSING else _check_width(value, _INT_BITS))


class OptionalLong(OptionalValue[int]):
    """Optional holding a signed 64-bit integer."""

    __slots__ = ()

    def __init__(self, value: Any = _MISSING) -> None:
        super().__init__(value if value is _MISSING else _check_width(value, _LONG_BITS))


class OptionalDouble(OptionalValue[float]):
    """Optional holding a float."""

    __slots__ = ()

    def __init__(self, value: Any = _MISSING) -> None:
        super().__init__(value if value is _MISSING else float(value))


# ---------------------------------------------------------------------------
# Atomic scalar boxes
# ---------------------------------------------------------------------------


class AtomicReference(Generic[T]):
    """A lock-guarded reference to a single value."""

    def __init__(self, value: T | None = None) -> None:
        self._lock = threading.Lock()
        self._value = self._coerce(value)

    def _coerce(self, value: Any) -> Any:
        return value

    def get(self) -> Any:
        with self._lock:
            return self._value

    def set(self, value: Any) -> None:
        value = self._coerce(value)
        with self._lock:
            self._value = value

    def get_and_set(self, value: Any) -> Any:
        value = self._coerce(value)
        with self._lock:
            previous, self._value = self._value, value
            return previous

    def compare_and_set(self, expected: Any, value: Any) -> bool:
        """Set ``value`` only when the current value is ``expected`` (identity)."""
        value = self._coerce(value)
        with self._lock:
            if self._value is not expected:
                return False
            self._value = value
            return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get()!r})"


class AtomicBoolean(AtomicReference[bool]):
    def __init__(self, value: bool = False) -> None:
        super().__init__(value)

    def _coerce(self, value: Any) -> bool:
        return bool(value)


class AtomicInteger(AtomicReference[int]):
    """Signed 32-bit counter."""

    _bits = _INT_BITS

    def __init__(self, value: int = 0) -> None:
        super().__init__(value)

    def _coerce(self, value: Any) -> int:
        return _check_width(value, self._bits)

    def add_and_get(self, delta: int) -> int:
        with self._lock:
            self._value = _check_width(self._value + delta, self._bits)
            return self._value

    def increment_and_get(self) -> int:
        return self.add_and_get(1)

    def decrement_and_get(self) -> int:
        return self.add_and_get(-1)


class AtomicLong(AtomicInteger):
    """Signed 64-bit counter."""

    _bits = _LONG_BITS


# ---------------------------------------------------------------------------
# Atomic arrays
# ---------------------------------------------------------------------------


class AtomicReferenceArray(Generic[T]):
    """Fixed-length array whose slots are read and written under a lock."""

    def __init__(self, values: int | Iterable[Any]) -> None:
        self._lock = threading.Lock()
        if isinstance(values, int):
            self._values = [self._default()] * values
        else:
            self._values = [self._coerce(v) for v in values]

    def _default(self) -> Any:
        return None

    def _coerce(self, value: Any) -> Any:
        return value

    def __len__(self) -> int:
        return len(self._values)

    def get(self, index: int) -> Any:
        with self._lock:
            return self._values[index]

    def set(self, index: int, value: Any) -> None:
        value = self._coerce(value)
        with self._lock:
            self._values[index] = value

    def snapshot(self) -> list[Any]:
        with self._lock:
            return list(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.snapshot()!r})"


class AtomicIntegerArray(AtomicReferenceArray[int]):
    _bits = _INT_BITS

    def _default(self) -> int:
        return 0

    def _coerce(self, value: Any) -> int:
        return _check_width(value, self._bits)

    def add_and_get(self, index: int, delta: int) -> int:
        with self._lock:
            self._values[index] = _check_width(self._values[index] + delta, self._bits)
            return self._values[index]


class AtomicLongArray(AtomicIntegerArray):
    _bits = _LONG_BITS
