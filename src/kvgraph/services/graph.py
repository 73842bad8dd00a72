"""Graph: the property-graph façade over a sorted key-value store.

Element state per ID: absent -> live -> absent. Every mutation validates
its arguments before the first write, enqueues its cells on the shared
writer, and flushes before returning, so a caller never observes its own
write as missing.

Multi-row operations are not atomic. A failure part way through a
cascade leaves the steps already flushed in place; each step is logged
at DEBUG and the error propagates unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

from kvgraph.domain.encoding import (
    ADJACENCY_FAMILIES,
    LABEL,
    compose_adjacency,
    decompose_adjacency,
    deserialize,
    encode_id,
    invert_family,
    serialize,
)
from kvgraph.domain.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    LabelRequiredError,
    NotFoundError,
)
from kvgraph.domain.ids import (
    LABEL_KEY,
    coerce_id,
    generate_id,
    normalize_id,
    validate_key,
    validate_property,
)
from kvgraph.domain.types import Direction, ElementKind
from kvgraph.services.base import BaseService
from kvgraph.services.elements import Edge, Element, Vertex
from kvgraph.services.indexing import IndexService

if TYPE_CHECKING:
    from collections.abc import Iterable

    import networkx as nx

    from kvgraph.config.settings import GraphSettings
    from kvgraph.infrastructure.context import GraphContext
    from kvgraph.infrastructure.store.base import KeyValueStore
    from kvgraph.infrastructure.tables import AdjacencyEntry
    from kvgraph.services.indexing import NamedIndex

logger = logging.getLogger(__name__)


class Graph(BaseService):
    """A mutable, labeled, directed property graph.

    Usage::

        with open_graph(GraphSettings.load()) as g:
            alice = g.add_vertex("alice")
            bob = g.add_vertex("bob")
            g.add_edge(alice, bob, "knows").set_property("since", 2019)
    """

    def __init__(self, ctx: GraphContext) -> None:
        super().__init__(ctx)
        self._indexes = IndexService(ctx, self._resolve)

    @property
    def indexes(self) -> IndexService:
        return self._indexes

    # ------------------------------------------------------------------
    # Vertices
    # ------------------------------------------------------------------

    def add_vertex(self, vertex_id: Any = None) -> Vertex:
        """Create a vertex; a random ID is generated when *vertex_id* is None.

        Raises:
            EncodingError: If the ID contains the adjacency delimiter.
            AlreadyExistsError: If a live vertex already has the ID.
        """
        vertex_id = generate_id() if vertex_id is None else normalize_id(vertex_id)
        if not self._cfg.skip_existence_checks and self._ctx.vertices.exists(vertex_id):
            msg = f"Vertex with ID {vertex_id!r} already exists"
            raise AlreadyExistsError(msg, id=vertex_id)

        self._ctx.vertices.write_vertex(vertex_id)
        self._ctx.checked_flush()
        vertex = Vertex(self, vertex_id)
        self._ctx.cache.cache(vertex)
        logger.debug("Added vertex %s", vertex_id)
        return vertex

    def get_vertex(self, vertex_id: Any) -> Vertex | None:
        vertex_id = coerce_id(vertex_id)
        cached = self._ctx.cache.retrieve(vertex_id, ElementKind.VERTEX)
        if cached is not None:
            return cached  # type: ignore[return-value]
        if self._cfg.skip_existence_checks:
            vertex = Vertex(self, vertex_id)
            self._ctx.cache.cache(vertex)
            return vertex
        return self._load(ElementKind.VERTEX, vertex_id)  # type: ignore[return-value]

    def remove_vertex(self, vertex: Vertex | str) -> None:
        """Remove a vertex, its incident edges, and its index postings.

        Order: cache eviction, named-index cleanup, mirrored adjacency and
        key-index deletes (flushed), incident edge rows, the vertex row.
        Incident edges' own key-index postings are not removed; lookups
        skip them as stale.

        Raises:
            NotFoundError: If the vertex row is empty.
        """
        vertex_id = self._element_id(vertex, ElementKind.VERTEX)
        self._ctx.cache.remove(vertex_id, ElementKind.VERTEX)
        if self._cfg.named_indexes_enabled:
            self._indexes.remove_from_named_indexes(vertex_id, ElementKind.VERTEX)

        cells = self._ctx.vertices.scan_row(encode_id(vertex_id))
        if not cells:
            msg = f"Vertex with ID {vertex_id!r} does not exist"
            raise NotFoundError(msg, id=vertex_id)

        edge_ids: list[str] = []
        for cell in cells:
            if cell.family in ADJACENCY_FAMILIES:
                other_id, edge_id = decompose_adjacency(cell.qualifier)
                edge_ids.append(edge_id)
                self._ctx.vertices.delete(
                    encode_id(other_id),
                    invert_family(cell.family),
                    compose_adjacency(vertex_id, edge_id),
                )
            elif cell.family != LABEL:
                self._ctx.vertex_key_index.remove_raw(
                    vertex_id, cell.family.decode("utf-8"), cell.value
                )
        self._ctx.checked_flush()
        logger.debug("Removed adjacency and key-index entries of vertex %s", vertex_id)

        edge_ids = list(dict.fromkeys(edge_ids))
        if edge_ids:
            for edge_id in edge_ids:
                self._ctx.cache.remove(edge_id, ElementKind.EDGE)
            self._ctx.edges.delete_rows(edge_ids)
            logger.debug("Removed %d incident edge row(s) of vertex %s", len(edge_ids), vertex_id)

        self._ctx.vertices.delete_rows([vertex_id])
        logger.debug("Removed vertex %s", vertex_id)

    def get_vertices(self, key: str | None = None, value: Any = None) -> list[Vertex]:
        """Every live vertex, or those whose property *key* equals *value*."""
        if key is None and value is None:
            return [
                self._handle(ElementKind.VERTEX, snap.element_id, properties=snap.properties)
                for snap in self._ctx.vertices.snapshots()
            ]
        return self._lookup(ElementKind.VERTEX, key, value)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_edge(
        self,
        out_vertex: Vertex | str,
        in_vertex: Vertex | str,
        label: str,
        edge_id: Any = None,
    ) -> Edge:
        """Create an edge from *out_vertex* (tail) to *in_vertex* (head).

        Raises:
            LabelRequiredError: If *label* is None.
            NotFoundError: If ``verify_edge_endpoints`` is on and an endpoint is missing.
            AlreadyExistsError: If a live edge already has the ID.
        """
        if label is None:
            raise LabelRequiredError("Edge label can not be null")
        if not isinstance(label, str):
            msg = f"Edge label must be a string, got {type(label).__name__}"
            raise InvalidArgumentError(msg)
        out_id = self._element_id(out_vertex, ElementKind.VERTEX)
        in_id = self._element_id(in_vertex, ElementKind.VERTEX)
        normalize_id(out_id)
        normalize_id(in_id)
        edge_id = generate_id() if edge_id is None else normalize_id(edge_id)

        if self._cfg.verify_edge_endpoints:
            for endpoint in dict.fromkeys((out_id, in_id)):
                if not self._ctx.vertices.exists(endpoint):
                    msg = f"Vertex with ID {endpoint!r} does not exist"
                    raise NotFoundError(msg, id=endpoint)
        if not self._cfg.skip_existence_checks and self._ctx.edges.exists(edge_id):
            msg = f"Edge with ID {edge_id!r} already exists"
            raise AlreadyExistsError(msg, id=edge_id)

        self._ctx.edges.write_edge(edge_id, out_id, in_id, label)
        self._ctx.vertices.write_edge_endpoints(edge_id, out_id, in_id, label)
        self._ctx.checked_flush()
        edge = Edge(self, edge_id, out_id, in_id, label)
        self._ctx.cache.cache(edge)
        logger.debug("Added edge %s: %s -[%s]-> %s", edge_id, out_id, label, in_id)
        return edge

    def get_edge(self, edge_id: Any) -> Edge | None:
        edge_id = coerce_id(edge_id)
        cached = self._ctx.cache.retrieve(edge_id, ElementKind.EDGE)
        if cached is not None:
            return cached  # type: ignore[return-value]
        if self._cfg.skip_existence_checks:
            edge = Edge(self, edge_id)
            self._ctx.cache.cache(edge)
            return edge
        return self._load(ElementKind.EDGE, edge_id)  # type: ignore[return-value]

    def remove_edge(self, edge: Edge | str) -> None:
        """Remove an edge, its adjacency entries, and its index postings.

        Raises:
            NotFoundError: If the edge row is empty.
        """
        edge_id = self._element_id(edge, ElementKind.EDGE)
        self._ctx.cache.remove(edge_id, ElementKind.EDGE)
        if self._cfg.named_indexes_enabled:
            self._indexes.remove_from_named_indexes(edge_id, ElementKind.EDGE)

        cells = self._ctx.edges.scan_row(encode_id(edge_id))
        if not cells:
            msg = f"Edge with ID {edge_id!r} does not exist"
            raise NotFoundError(msg, id=edge_id)

        endpoints = self._ctx.edges.read_endpoints(edge_id)
        for cell in cells:
            if cell.family != LABEL:
                self._ctx.edge_key_index.remove_raw(
                    edge_id, cell.family.decode("utf-8"), cell.value
                )
        if endpoints is not None:
            self._ctx.vertices.delete_edge_endpoints(edge_id, *endpoints)
        self._ctx.checked_flush()
        logger.debug("Removed adjacency and key-index entries of edge %s", edge_id)

        self._ctx.edges.delete_rows([edge_id])
        logger.debug("Removed edge %s", edge_id)

    def get_edges(self, key: str | None = None, value: Any = None) -> list[Edge]:
        """Every live edge, or those whose property *key* equals *value*.

        ``get_edges("label", x)`` matches the edge label.
        """
        if key is None and value is None:
            return [
                self._handle(
                    ElementKind.EDGE,
                    rec.edge_id,
                    properties=rec.properties,
                    endpoints=(rec.out_id, rec.in_id, rec.label),
                )
                for rec in self._ctx.edges.records()
            ]
        return self._lookup(ElementKind.EDGE, key, value)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Key and named indexes
    # ------------------------------------------------------------------

    def create_key_index(self, key: str, kind: ElementKind | str) -> None:
        self._indexes.create_key_index(key, kind)

    def drop_key_index(self, key: str, kind: ElementKind | str) -> None:
        self._indexes.drop_key_index(key, kind)

    def get_indexed_keys(self, kind: ElementKind | str) -> set[str]:
        return self._indexes.get_indexed_keys(kind)

    def create_index(self, name: str, kind: ElementKind | str) -> NamedIndex:
        return self._indexes.create_index(name, kind)

    def get_index(self, name: str, kind: ElementKind | str) -> NamedIndex | None:
        return self._indexes.get_index(name, kind)

    def get_indices(self) -> list[NamedIndex]:
        return self._indexes.get_indices()

    def drop_index(self, name: str) -> None:
        self._indexes.drop_index(name)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Flush outstanding writes and drop cached handles."""
        self._ctx.writer.close()
        self._ctx.cache.clear()
        logger.debug("Graph %s shut down", self._ctx.tables.prefix)

    def close(self) -> None:
        """Shut down and release the store's connections."""
        try:
            self.shutdown()
        finally:
            self._ctx.store.close()

    def clear(self) -> None:
        """Delete every element and index, leaving empty base tables."""
        self.shutdown()
        self._ctx.delete_tables()
        for name in self._ctx.tables.base_tables():
            self._ctx.store.create_table(name)
        self._ctx.writer.reopen()

    def is_empty(self) -> bool:
        return all(
            next(self._ctx.store.scan(name, limit=1), None) is None
            for name in self._ctx.tables.base_tables()
        )

    def to_networkx(self) -> nx.MultiDiGraph:
        """Snapshot the graph as a :class:`networkx.MultiDiGraph`."""
        from kvgraph.services.export import build_networkx

        return build_networkx(self._ctx)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Element handle support
    # ------------------------------------------------------------------

    def _read_property(self, element: Element, key: str) -> Any:
        return self._ctx.element_table(element.kind).read_property(element.id, key)

    def _property_keys(self, element: Element) -> set[str]:
        return self._ctx.element_table(element.kind).read_property_keys(element.id)

    def _set_property(self, element: Element, key: str, value: Any) -> None:
        validate_property(key, value)
        raw = serialize(value)
        table = self._ctx.element_table(element.kind)
        if not self._cfg.skip_existence_checks and not table.exists(element.id):
            msg = f"{element.kind} with ID {element.id!r} does not exist"
            raise NotFoundError(msg, id=element.id)
        if self._indexes.is_indexed(key, element.kind):
            index = self._ctx.key_index(element.kind)
            old = table.read_raw_property(element.id, key)
            if old is not None and old != raw:
                index.remove_raw(element.id, key, old)
            index.add_raw(element.id, key, raw)
        table.write_property(element.id, key, value)
        self._ctx.checked_flush()

    def _remove_property(self, element: Element, key: str) -> Any:
        validate_key(key)
        table = self._ctx.element_table(element.kind)
        old = table.read_raw_property(element.id, key)
        if old is None:
            return None
        if self._indexes.is_indexed(key, element.kind):
            self._ctx.key_index(element.kind).remove_raw(element.id, key, old)
        table.clear_property(element.id, key)
        self._ctx.checked_flush()
        return deserialize(old)

    def _edge_info(self, edge_id: str) -> tuple[str, str, str]:
        """``(label, out_id, in_id)`` read from the edge row."""
        record = self._ctx.edges.read_edge(edge_id)
        if record is None:
            msg = f"Edge with ID {edge_id!r} does not exist"
            raise NotFoundError(msg, id=edge_id)
        return record.label, record.out_id, record.in_id

    def _adjacency(
        self, vertex: Vertex, direction: Direction, labels: Iterable[str]
    ) -> list[AdjacencyEntry]:
        return self._ctx.vertices.read_adjacency(vertex.id, direction, labels)

    def _incident_edges(
        self, vertex: Vertex, direction: Direction, labels: Iterable[str]
    ) -> list[Edge]:
        edges = []
        for entry in self._adjacency(vertex, direction, labels):
            if entry.direction is Direction.OUT:
                out_id, in_id = vertex.id, entry.other_id
            else:
                out_id, in_id = entry.other_id, vertex.id
            edges.append(
                self._handle(ElementKind.EDGE, entry.edge_id, endpoints=(out_id, in_id, entry.label))
            )
        return edges  # type: ignore[return-value]

    def _adjacent_vertices(
        self, vertex: Vertex, direction: Direction, labels: Iterable[str]
    ) -> list[Vertex]:
        return [
            self._handle(ElementKind.VERTEX, entry.other_id)  # type: ignore[misc]
            for entry in self._adjacency(vertex, direction, labels)
        ]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _element_id(element: Element | Any, kind: ElementKind) -> str:
        if isinstance(element, Element):
            if element.kind is not kind:
                msg = f"Expected a {kind}, got a {element.kind}"
                raise InvalidArgumentError(msg, id=element.id)
            return element.id
        return coerce_id(element)

    def _handle(
        self,
        kind: ElementKind,
        element_id: str,
        *,
        properties: dict[str, Any] | None = None,
        endpoints: tuple[str, str, str] | None = None,
    ) -> Element:
        """Cached handle if present, otherwise a new uncached one."""
        cached = self._ctx.cache.retrieve(element_id, kind)
        if cached is not None:
            return cached  # type: ignore[return-value]
        if kind is ElementKind.VERTEX:
            return Vertex(self, element_id, properties)
        out_id, in_id, label = endpoints or (None, None, None)
        return Edge(self, element_id, out_id, in_id, label, properties)

    def _load(self, kind: ElementKind, element_id: str) -> Element | None:
        """Read the row (with preloaded properties) and cache the handle."""
        preload = self._cfg.preload_properties
        element: Element
        if kind is ElementKind.VERTEX:
            props = self._ctx.vertices.read_properties(element_id, preload)
            if props is None:
                return None
            element = Vertex(self, element_id, props)
        else:
            record = self._ctx.edges.read_edge(element_id, preload)
            if record is None:
                return None
            element = Edge(
                self, element_id, record.out_id, record.in_id, record.label, record.properties
            )
        self._ctx.cache.cache(element)
        return element

    def _resolve(self, kind: ElementKind, element_id: str) -> Element | None:
        cached = self._ctx.cache.retrieve(element_id, kind)
        if cached is not None:
            return cached  # type: ignore[return-value]
        return self._load(kind, element_id)

    def _lookup(self, kind: ElementKind, key: str | None, value: Any) -> list[Element]:
        if key is None or value is None:
            raise InvalidArgumentError("Lookup key and value can not be null")
        if kind is ElementKind.EDGE and key == LABEL_KEY:
            ids = self._ctx.edges.ids_with_label(value)
        elif self._indexes.is_indexed(key, kind):
            ids = self._ctx.key_index(kind).lookup(key, value)
        else:
            ids = self._ctx.element_table(kind).ids_with_value(key, value)
        return self._indexes.resolve(kind, ids)


def open_graph(
    settings: GraphSettings | None = None, *, store: KeyValueStore | None = None
) -> Graph:
    """Open (creating or clearing tables as configured) the graph *settings* describe.

    Args:
        settings: Defaults to :meth:`GraphSettings.load` from the CWD.
        store: Use this store instead of building one from ``settings.store_url``.
    """
    from kvgraph.config.models import KvGraphConfig
    from kvgraph.config.settings import GraphSettings
    from kvgraph.infrastructure.context import GraphContext
    from kvgraph.infrastructure.store import SqlAlchemyStore, create_store_engine

    if settings is None:
        settings = GraphSettings.load()
    if store is None:
        store = SqlAlchemyStore(create_store_engine(settings.store_url, echo=settings.store.echo))
    config = KvGraphConfig(
        store=settings.store, graph=settings.graph, writer=settings.writer, query=settings.query
    )
    ctx = GraphContext(store, config)
    ctx.prepare_tables()
    logger.debug("Opened graph %s on %s", config.graph.name, type(store).__name__)
    return Graph(ctx)
