"""Element handles: Vertex and Edge.

A handle is a lightweight reference bound to the graph that produced it.
Properties read or written through a handle are remembered on it, so a
cached handle answers repeated ``get_property`` calls without a store read.
Equality and hashing use ``(kind, id)`` only.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from kvgraph.domain.errors import InvalidArgumentError
from kvgraph.domain.ids import ID_KEY, LABEL_KEY
from kvgraph.domain.types import Direction, ElementKind

if TYPE_CHECKING:
    from kvgraph.services.graph import Graph


class Element(ABC):
    kind: ClassVar[ElementKind]

    def __init__(
        self, graph: Graph, element_id: str, properties: dict[str, Any] | None = None
    ) -> None:
        self._graph = graph
        self._id = element_id
        self._properties: dict[str, Any] = dict(properties or {})

    @property
    def id(self) -> str:
        return self._id

    @property
    def graph(self) -> Graph:
        return self._graph

    def get_property(self, key: str) -> Any:
        """Return the value of *key*, or None when the element lacks it."""
        if key == ID_KEY:
            return self._id
        if key in self._properties:
            return self._properties[key]
        value = self._graph._read_property(self, key)
        if value is not None:
            self._properties[key] = value
        return value

    def set_property(self, key: str, value: Any) -> None:
        self._graph._set_property(self, key, value)
        self._properties[key] = value

    def remove_property(self, key: str) -> Any:
        """Delete *key* and return its previous value (None if it was unset)."""
        old = self._graph._remove_property(self, key)
        self._properties.pop(key, None)
        return old

    def property_keys(self) -> set[str]:
        return self._graph._property_keys(self)

    def properties(self) -> dict[str, Any]:
        """Every stored property keyed by name."""
        return {key: self.get_property(key) for key in sorted(self.property_keys())}

    @abstractmethod
    def remove(self) -> None:
        """Remove the element from its graph."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return self.kind == other.kind and self._id == other._id

    def __hash__(self) -> int:
        return hash((self.kind, self._id))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._id!r})"


class Vertex(Element):
    kind: ClassVar[ElementKind] = ElementKind.VERTEX

    def get_edges(self, direction: Direction | str = Direction.BOTH, *labels: str) -> list[Edge]:
        """Incident edges, optionally restricted to *labels*."""
        return self._graph._incident_edges(self, Direction.parse(direction), labels)

    def get_vertices(
        self, direction: Direction | str = Direction.BOTH, *labels: str
    ) -> list[Vertex]:
        """Vertices at the other end of each incident edge (one per edge)."""
        return self._graph._adjacent_vertices(self, Direction.parse(direction), labels)

    def add_edge(self, label: str, in_vertex: Vertex | str, edge_id: Any = None) -> Edge:
        return self._graph.add_edge(self, in_vertex, label, edge_id)

    def remove(self) -> None:
        self._graph.remove_vertex(self)


class Edge(Element):
    kind: ClassVar[ElementKind] = ElementKind.EDGE

    def __init__(
        self,
        graph: Graph,
        element_id: str,
        out_id: str | None = None,
        in_id: str | None = None,
        label: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(graph, element_id, properties)
        self._out_id = out_id
        self._in_id = in_id
        self._label = label

    def _ensure_loaded(self) -> tuple[str, str, str]:
        """``(label, out_id, in_id)``, read from the edge row on first use."""
        if self._label is None or self._out_id is None or self._in_id is None:
            info = self._graph._edge_info(self._id)
            self._label, self._out_id, self._in_id = info
            return info
        return self._label, self._out_id, self._in_id

    @property
    def label(self) -> str:
        return self._ensure_loaded()[0]

    @property
    def out_vertex_id(self) -> str:
        return self._ensure_loaded()[1]

    @property
    def in_vertex_id(self) -> str:
        return self._ensure_loaded()[2]

    def get_property(self, key: str) -> Any:
        if key == LABEL_KEY:
            return self.label
        return super().get_property(key)

    def get_vertex(self, direction: Direction | str) -> Vertex | None:
        """The tail (OUT) or head (IN) vertex; None if it no longer exists."""
        direction = Direction.parse(direction)
        if direction is Direction.BOTH:
            raise InvalidArgumentError("An edge has no single vertex in direction BOTH")
        vertex_id = self.out_vertex_id if direction is Direction.OUT else self.in_vertex_id
        return self._graph.get_vertex(vertex_id)

    def remove(self) -> None:
        self._graph.remove_edge(self)
