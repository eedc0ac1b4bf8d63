"""ComparisonPolicy: caller-supplied configuration for a recursive comparison.

ComparisonPolicy is a frozen (immutable) dataclass holding the ignore rules,
comparator overrides and type-checking switches.  Cheap structural checks run
at construction time; anything that needs resolving (dotted type names,
regular expressions) is resolved by ``resolve()``, which the engine calls once
at the start of every comparison, before any traversal happens.
"""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from object_deep_diff.model.path import FieldPath

__all__ = ["ComparisonPolicy", "PolicyConfigurationError", "ResolvedPolicy"]

logger = logging.getLogger(__name__)

Comparator = Callable[[Any, Any], bool]
TypeRef = type | str


class PolicyConfigurationError(ValueError):
    """An ignore rule or comparator in the policy cannot be resolved."""


@dataclass(frozen=True, slots=True)
class ComparisonPolicy:
    """Immutable configuration for the traversal engine.

    Attributes:
        ignored_fields: Rendered paths (``"order.lines[0].sku"``) to skip.
            Ignoring a path also ignores everything below it.
        ignored_fields_matching: Regular expressions full-matched against
            rendered paths; matching nodes are skipped.
        ignored_types: Types (or dotted names such as ``"uuid.UUID"``) whose
            values are skipped wherever they appear on either side.
        field_comparators: Rendered path -> ``(actual, expected) -> bool``
            used instead of the default comparison at that path.
        type_comparators: Type (or dotted name) -> ``(actual, expected) -> bool``
            used for values of that type or any subclass.
        strict_type_checking: When True, two values of different concrete
            types are always a shape mismatch, even if they would compare
            equal (``1`` vs ``1.0``, ``list`` vs ``tuple``).  Default False.
        treat_null_as_distinct_from_empty: When False, ``None`` on one side
            matches an empty container, empty string or empty optional on
            the other.  Default True.
    """

    ignored_fields: frozenset[str] = frozenset()
    ignored_fields_matching: tuple[str, ...] = ()
    ignored_types: tuple[TypeRef, ...] = ()
    field_comparators: Mapping[str, Comparator] = field(default_factory=dict)
    type_comparators: Mapping[TypeRef, Comparator] = field(default_factory=dict)
    strict_type_checking: bool = False
    treat_null_as_distinct_from_empty: bool = True

    def __post_init__(self) -> None:
        # Accept any iterable/mapping but store immutable copies.
        object.__setattr__(self, "ignored_fields", frozenset(_as_iterable(self.ignored_fields)))
        object.__setattr__(self, "ignored_fields_matching", tuple(_as_iterable(self.ignored_fields_matching)))
        object.__setattr__(self, "ignored_types", tuple(_as_iterable(self.ignored_types)))
        object.__setattr__(self, "field_comparators", dict(self.field_comparators))
        object.__setattr__(self, "type_comparators", dict(self.type_comparators))

        for path in self.ignored_fields:
            if not isinstance(path, str):
                msg = f"ignored_fields entries must be str, got {path!r}"
                raise PolicyConfigurationError(msg)
        for pattern in self.ignored_fields_matching:
            if not isinstance(pattern, str):
                msg = f"ignored_fields_matching entries must be str, got {pattern!r}"
                raise PolicyConfigurationError(msg)
        for path, comparator in self.field_comparators.items():
            if not isinstance(path, str):
                msg = f"field_comparators keys must be str paths, got {path!r}"
                raise PolicyConfigurationError(msg)
            if not callable(comparator):
                msg = f"comparator registered for field {path!r} is not callable"
                raise PolicyConfigurationError(msg)
        for type_ref, comparator in self.type_comparators.items():
            if not callable(comparator):
                msg = f"comparator registered for type {type_ref!r} is not callable"
                raise PolicyConfigurationError(msg)

    def __hash__(self) -> int:
        return hash(
            (
                self.ignored_fields,
                self.ignored_fields_matching,
                self.ignored_types,
                tuple(self.field_comparators.items()),
                tuple(self.type_comparators.items()),
                self.strict_type_checking,
                self.treat_null_as_distinct_from_empty,
            )
        )

    def resolve(self) -> ResolvedPolicy:
        """Resolve every rule against real types and compiled patterns.

        Returns:
            A ``ResolvedPolicy`` ready for the traversal engine.

        Raises:
            PolicyConfigurationError: If a dotted type name cannot be imported,
                names something that is not a type, or a pattern is not a
                valid regular expression.
        """
        patterns: list[re.Pattern[str]] = []
        for pattern in self.ignored_fields_matching:
            try:
                patterns.append(re.compile(pattern))
            except re.error as exc:
                msg = f"invalid ignored_fields_matching pattern {pattern!r}: {exc}"
                raise PolicyConfigurationError(msg) from exc

        resolved = ResolvedPolicy(
            ignored_paths=tuple(FieldPath.parse(p) for p in sorted(self.ignored_fields)),
            ignored_patterns=tuple(patterns),
            ignored_types=tuple(_resolve_type(t) for t in self.ignored_types),
            field_comparators=dict(self.field_comparators),
            type_comparators={_resolve_type(t): c for t, c in self.type_comparators.items()},
            strict_type_checking=self.strict_type_checking,
            treat_null_as_distinct_from_empty=self.treat_null_as_distinct_from_empty,
        )
        logger.debug(
            "Resolved policy: %d ignored paths, %d patterns, %d ignored types, "
            "%d field comparators, %d type comparators",
            len(resolved.ignored_paths),
            len(resolved.ignored_patterns),
            len(resolved.ignored_types),
            len(resolved.field_comparators),
            len(resolved.type_comparators),
        )
        return resolved


class ResolvedPolicy:
    """Policy with every rule resolved; answers per-node questions for the engine."""

    __slots__ = (
        "_comparator_by_type",
        "field_comparators",
        "ignored_paths",
        "ignored_patterns",
        "ignored_types",
        "strict_type_checking",
        "treat_null_as_distinct_from_empty",
        "type_comparators",
    )

    def __init__(
        self,
        ignored_paths: tuple[FieldPath, ...] = (),
        ignored_patterns: tuple[re.Pattern[str], ...] = (),
        ignored_types: tuple[type, ...] = (),
        field_comparators: dict[str, Comparator] | None = None,
        type_comparators: dict[type, Comparator] | None = None,
        strict_type_checking: bool = False,
        treat_null_as_distinct_from_empty: bool = True,
    ) -> None:
        self.ignored_paths = ignored_paths
        self.ignored_patterns = ignored_patterns
        self.ignored_types = ignored_types
        self.field_comparators = field_comparators or {}
        self.type_comparators = type_comparators or {}
        self.strict_type_checking = strict_type_checking
        self.treat_null_as_distinct_from_empty = treat_null_as_distinct_from_empty
        self._comparator_by_type: dict[type, Comparator | None] = {}

    def is_ignored(self, path: FieldPath, actual: Any, expected: Any) -> bool:
        """True when neither recursion nor leaf comparison should happen here."""
        if path.is_root:
            return False
        if any(path.startswith(ignored) for ignored in self.ignored_paths):
            return True
        if self.ignored_patterns:
            rendered = path.render()
            if any(p.fullmatch(rendered) for p in self.ignored_patterns):
                return True
        if self.ignored_types:
            return isinstance(actual, self.ignored_types) or isinstance(expected, self.ignored_types)
        return False

    def comparator_for(self, path: FieldPath, actual: Any, expected: Any) -> Comparator | None:
        """Comparator overriding the default decision at this node, if any.

        Field comparators win over type comparators.  Type comparators are
        looked up by the expected value's type (the actual value's when
        expected is ``None``) walking its MRO, and never apply when both
        sides are ``None``.
        """
        if self.field_comparators:
            comparator = self.field_comparators.get(path.render())
            if comparator is not None:
                return comparator
        if not self.type_comparators:
            return None
        value = expected if expected is not None else actual
        if value is None:
            return None
        return self._type_comparator(type(value))

    def _type_comparator(self, cls: type) -> Comparator | None:
        try:
            return self._comparator_by_type[cls]
        except KeyError:
            pass
        found = next(
            (self.type_comparators[base] for base in cls.__mro__ if base in self.type_comparators),
            None,
        )
        self._comparator_by_type[cls] = found
        return found


def _as_iterable(value: Any) -> Iterable[Any]:
    # A bare string would otherwise be split into characters.
    if isinstance(value, (str, type)):
        return (value,)
    return value


def _resolve_type(type_ref: TypeRef) -> type:
    if isinstance(type_ref, type):
        return type_ref
    if not isinstance(type_ref, str) or "." not in type_ref:
        msg = f"type reference must be a type or a dotted name, got {type_ref!r}"
        raise PolicyConfigurationError(msg)
    module_name, _, attr = type_ref.rpartition(".")
    try:
        resolved = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as exc:
        msg = f"cannot resolve type {type_ref!r}"
        raise PolicyConfigurationError(msg) from exc
    if not isinstance(resolved, type):
        msg = f"{type_ref!r} does not name a type"
        raise PolicyConfigurationError(msg)
    return resolved
