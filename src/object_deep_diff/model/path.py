"""FieldPath: immutable location of a node relative to the comparison root.

A path is an ordered tuple of string segments.  Attribute and mapping-key
segments are plain names; positional segments are bracketed (``"[3]"``) so
that rendering can attach them without a dot::

    FieldPath.root().child("order").child("lines").child(0).child("sku")
    # renders as "order.lines[0].sku"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["FieldPath"]


def _to_segment(segment: Any) -> str:
    if isinstance(segment, str):
        # keys that look like index segments are quoted: "[0]" -> "['[0]']"
        return f"[{segment!r}]" if segment.startswith("[") else segment
    # bool is an int subclass but True/False read better as keys
    if isinstance(segment, int) and not isinstance(segment, bool):
        return f"[{segment}]"
    return f"[{segment!r}]"


@dataclass(frozen=True, slots=True)
class FieldPath:
    """Ordered sequence of field-name segments.

    Attributes:
        segments: The path segments from the root, root being ``()``.
    """

    segments: tuple[str, ...] = ()

    @classmethod
    def root(cls) -> FieldPath:
        return _ROOT

    @classmethod
    def parse(cls, rendered: str) -> FieldPath:
        """Build a path from its rendered form (inverse of ``render``).

        Only names without dots or brackets round-trip; keys containing those
        characters should be built with ``child`` instead.
        """
        if not rendered:
            return _ROOT
        segments: list[str] = []
        for part in rendered.split("."):
            head, bracket, rest = part.partition("[")
            if head:
                segments.append(head)
            if bracket:
                segments.extend(f"[{index}" for index in rest.split("["))
        return cls(tuple(segments))

    def child(self, segment: Any) -> FieldPath:
        return FieldPath((*self.segments, _to_segment(segment)))

    @property
    def field_name(self) -> str:
        """Last segment, or ``""`` for the root path."""
        return self.segments[-1] if self.segments else ""

    @property
    def parent(self) -> FieldPath:
        return FieldPath(self.segments[:-1]) if self.segments else self

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    def startswith(self, other: FieldPath) -> bool:
        """True when ``other`` is this path or one of its ancestors."""
        return self.segments[: len(other.segments)] == other.segments

    def render(self) -> str:
        """Dotted form of the path, e.g. ``"lines[0].sku"``.

        There is no leading dot: a top-level key ``b`` renders as ``"b"`` and
        the root renders as ``""``.  Bracketed segments attach without a dot.
        """
        parts: list[str] = []
        for segment in self.segments:
            if parts and not segment.startswith("["):
                parts.append(".")
            parts.append(segment)
        return "".join(parts)

    def __str__(self) -> str:
        return self.render()


_ROOT = FieldPath()
