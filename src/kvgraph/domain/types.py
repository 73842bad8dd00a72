"""Element kinds and traversal directions.

Table selection is driven by :class:`ElementKind` rather than by
run-time type inspection of element handles.
"""

from __future__ import annotations

from enum import StrEnum

from kvgraph.domain.errors import InvalidArgumentError


class ElementKind(StrEnum):
    """The two element kinds. Values double as metadata family tags."""

    VERTEX = "Vertex"
    EDGE = "Edge"

    @classmethod
    def parse(cls, value: str | ElementKind) -> ElementKind:
        """Accept a member or its name in any case (``"vertex"``, ``"Edge"``)."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        msg = f"Unknown element kind: {value!r}"
        raise InvalidArgumentError(msg)


class Direction(StrEnum):
    """Adjacency direction relative to a vertex."""

    OUT = "out"
    IN = "in"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str | Direction) -> Direction:
        try:
            return cls(str(value).lower())
        except ValueError as exc:
            msg = f"Unknown direction: {value!r}"
            raise InvalidArgumentError(msg) from exc

    def opposite(self) -> Direction:
        if self is Direction.OUT:
            return Direction.IN
        if self is Direction.IN:
            return Direction.OUT
        return Direction.BOTH
