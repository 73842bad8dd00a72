"""AdminService: ServiceResult-returning wrappers for the CLI.

Each method calls the :class:`Graph` façade and converts a raised
:class:`GraphError` into a failed :class:`ServiceResult`. Errors outside
the GraphError hierarchy propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from kvgraph.domain.errors import GraphError, InvalidArgumentError, NotFoundError
from kvgraph.domain.types import Direction, ElementKind
from kvgraph.services.export import jsonable, to_dot, to_json
from kvgraph.services.result import ServiceResult

if TYPE_CHECKING:
    from kvgraph.services.elements import Edge, Element, Vertex
    from kvgraph.services.graph import Graph

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "dot")


def _vertex_data(vertex: Vertex) -> dict[str, Any]:
    return {"id": vertex.id, "kind": str(vertex.kind), "properties": jsonable(vertex.properties())}


def _edge_data(edge: Edge) -> dict[str, Any]:
    return {
        "id": edge.id,
        "kind": str(edge.kind),
        "label": edge.label,
        "out_id": edge.out_vertex_id,
        "in_id": edge.in_vertex_id,
        "properties": jsonable(edge.properties()),
    }


def _element_data(element: Element) -> dict[str, Any]:
    if element.kind is ElementKind.EDGE:
        return _edge_data(element)  # type: ignore[arg-type]
    return _vertex_data(element)  # type: ignore[arg-type]


class AdminService:
    """CLI-facing operations over one open :class:`Graph`."""

    def __init__(self, graph: Graph) -> None:
        self._graph = graph

    @staticmethod
    def _run(op: str, action: Callable[[], dict[str, Any]]) -> ServiceResult:
        try:
            data = action()
        except GraphError as exc:
            logger.debug("%s failed: %s", op, exc, exc_info=True)
            return ServiceResult.failure(op, exc)
        return ServiceResult(ok=True, op=op, data=data)

    def _require(self, kind: ElementKind, element_id: str) -> Element:
        element = (
            self._graph.get_vertex(element_id)
            if kind is ElementKind.VERTEX
            else self._graph.get_edge(element_id)
        )
        if element is None:
            msg = f"{kind} with ID {element_id!r} does not exist"
            raise NotFoundError(msg, id=element_id)
        return element

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    def info(self) -> ServiceResult:
        def action() -> dict[str, Any]:
            ctx = self._graph.context
            data: dict[str, Any] = {
                "name": ctx.tables.prefix,
                "vertex_count": sum(1 for _ in ctx.vertices.element_ids()),
                "edge_count": sum(1 for _ in ctx.edges.element_ids()),
                "vertex_key_indexes": sorted(self._graph.get_indexed_keys(ElementKind.VERTEX)),
                "edge_key_indexes": sorted(self._graph.get_indexed_keys(ElementKind.EDGE)),
                "tables": ctx.tables.base_tables(),
            }
            if ctx.graph_config.named_indexes_enabled:
                data["indexes"] = [index.name for index in self._graph.get_indices()]
            return data

        return self._run("info", action)

    def init(self) -> ServiceResult:
        def action() -> dict[str, Any]:
            ctx = self._graph.context
            return {"name": ctx.tables.prefix, "tables": ctx.tables.base_tables()}

        return self._run("init", action)

    def export(self, fmt: str = "json") -> ServiceResult:
        def action() -> dict[str, Any]:
            if fmt not in EXPORT_FORMATS:
                msg = f"Unknown export format: {fmt}"
                raise InvalidArgumentError(msg, format=fmt, valid=list(EXPORT_FORMATS))
            g = self._graph.to_networkx()
            return {
                "format": fmt,
                "content": to_json(g) if fmt == "json" else to_dot(g),
                "node_count": g.number_of_nodes(),
                "edge_count": g.number_of_edges(),
            }

        return self._run("export", action)

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------

    def add_vertex(
        self, vertex_id: str | None = None, properties: dict[str, Any] | None = None
    ) -> ServiceResult:
        def action() -> dict[str, Any]:
            vertex = self._graph.add_vertex(vertex_id)
            for key, value in (properties or {}).items():
                vertex.set_property(key, value)
            return _vertex_data(vertex)

        return self._run("add_vertex", action)

    def get_vertex(self, vertex_id: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            vertex: Vertex = self._require(ElementKind.VERTEX, vertex_id)  # type: ignore[assignment]
            data = _vertex_data(vertex)
            edges = [
                {"id": e.id, "label": e.label, "direction": "out", "other_id": e.in_vertex_id}
                for e in vertex.get_edges(Direction.OUT)
            ]
            edges += [
                {"id": e.id, "label": e.label, "direction": "in", "other_id": e.out_vertex_id}
                for e in vertex.get_edges(Direction.IN)
            ]
            data["edges"] = edges
            return data

        return self._run("get_vertex", action)

    def remove_vertex(self, vertex_id: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._graph.remove_vertex(vertex_id)
            return {"id": vertex_id}

        return self._run("remove_vertex", action)

    def add_edge(
        self,
        out_id: str,
        in_id: str,
        label: str,
        edge_id: str | None = None,
        properties: dict[str, Any] | None = None,
    ) -> ServiceResult:
        def action() -> dict[str, Any]:
            edge = self._graph.add_edge(out_id, in_id, label, edge_id)
            for key, value in (properties or {}).items():
                edge.set_property(key, value)
            return _edge_data(edge)

        return self._run("add_edge", action)

    def get_edge(self, edge_id: str) -> ServiceResult:
        return self._run(
            "get_edge", lambda: _edge_data(self._require(ElementKind.EDGE, edge_id))  # type: ignore[arg-type]
        )

    def remove_edge(self, edge_id: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._graph.remove_edge(edge_id)
            return {"id": edge_id}

        return self._run("remove_edge", action)

    def set_property(
        self, kind: ElementKind | str, element_id: str, key: str, value: Any
    ) -> ServiceResult:
        def action() -> dict[str, Any]:
            element = self._require(ElementKind.parse(kind), element_id)
            element.set_property(key, value)
            return {"id": element.id, "key": key, "value": jsonable(value)}

        return self._run("set_property", action)

    def remove_property(self, kind: ElementKind | str, element_id: str, key: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            element = self._require(ElementKind.parse(kind), element_id)
            old = element.remove_property(key)
            return {"id": element.id, "key": key, "old_value": jsonable(old)}

        return self._run("remove_property", action)

    def find(self, kind: ElementKind | str, key: str, value: Any) -> ServiceResult:
        def action() -> dict[str, Any]:
            kind_ = ElementKind.parse(kind)
            if kind_ is ElementKind.VERTEX:
                found: list[Element] = list(self._graph.get_vertices(key, value))
            else:
                found = list(self._graph.get_edges(key, value))
            items = [_element_data(element) for element in found]
            return {"kind": str(kind_), "key": key, "items": items, "count": len(items)}

        return self._run("find", action)

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def create_key_index(self, key: str, kind: ElementKind | str) -> ServiceResult:
        def action() -> dict[str, Any]:
            count = self._graph.indexes.create_key_index(key, kind)
            return {"key": key, "kind": str(ElementKind.parse(kind)), "entries": count}

        return self._run("create_key_index", action)

    def drop_key_index(self, key: str, kind: ElementKind | str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._graph.drop_key_index(key, kind)
            return {"key": key, "kind": str(ElementKind.parse(kind))}

        return self._run("drop_key_index", action)

    def list_key_indexes(self) -> ServiceResult:
        def action() -> dict[str, Any]:
            return {
                str(kind): sorted(self._graph.get_indexed_keys(kind)) for kind in ElementKind
            }

        return self._run("list_key_indexes", action)

    def create_index(self, name: str, kind: ElementKind | str) -> ServiceResult:
        def action() -> dict[str, Any]:
            index = self._graph.create_index(name, kind)
            return {"name": index.name, "kind": str(index.kind)}

        return self._run("create_index", action)

    def drop_index(self, name: str) -> ServiceResult:
        def action() -> dict[str, Any]:
            self._graph.drop_index(name)
            return {"name": name}

        return self._run("drop_index", action)

    def list_indexes(self) -> ServiceResult:
        def action() -> dict[str, Any]:
            items = [{"name": i.name, "kind": str(i.kind)} for i in self._graph.get_indices()]
            return {"items": items, "count": len(items)}

        return self._run("list_indexes", action)
