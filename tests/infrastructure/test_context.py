"""Tests for GraphContext table wiring and lifecycle."""

from __future__ import annotations

import pytest

from kvgraph.config.models import GraphConfig, KvGraphConfig
from kvgraph.domain.errors import StoreUnavailableError
from kvgraph.domain.types import ElementKind
from kvgraph.infrastructure.context import GraphContext
from kvgraph.infrastructure.store import SqlAlchemyStore


def _context(store: SqlAlchemyStore, **graph: object) -> GraphContext:
    return GraphContext(store, KvGraphConfig(graph=GraphConfig(**graph)))


class TestTableNames:
    def test_prefixed_by_graph_name(self, store: SqlAlchemyStore) -> None:
        ctx = _context(store, name="social")
        assert ctx.vertices.name == "social_vertex"
        assert ctx.edges.name == "social_edge"
        assert ctx.named_index_table("people").name == "social_index_people"

    def test_kind_dispatch(self, store: SqlAlchemyStore) -> None:
        ctx = _context(store)
        assert ctx.element_table(ElementKind.VERTEX) is ctx.vertices
        assert ctx.element_table(ElementKind.EDGE) is ctx.edges
        assert ctx.key_index(ElementKind.EDGE) is ctx.edge_key_index


class TestPrepareTables:
    def test_creates_missing(self, store: SqlAlchemyStore) -> None:
        ctx = _context(store)
        ctx.prepare_tables()
        assert set(ctx.tables.base_tables()) <= set(store.list_tables())

    def test_missing_without_create(self, store: SqlAlchemyStore) -> None:
        ctx = _context(store, create=False)
        with pytest.raises(StoreUnavailableError):
            ctx.prepare_tables()

    def test_existing_without_create(self, store: SqlAlchemyStore) -> None:
        _context(store).prepare_tables()
        _context(store, create=False).prepare_tables()

    def test_clear_wipes_data(self, store: SqlAlchemyStore) -> None:
        ctx = _context(store)
        ctx.prepare_tables()
        ctx.vertices.write_vertex("v1")
        ctx.checked_flush()

        cleared = _context(store, clear=True, create=False)
        cleared.prepare_tables()
        assert cleared.vertices.is_empty()


class TestDeleteTables:
    def test_drops_named_index_tables(self, store: SqlAlchemyStore) -> None:
        ctx = _context(store)
        ctx.prepare_tables()
        ctx.index_names.register("people", ElementKind.VERTEX)
        ctx.checked_flush()
        store.create_table(ctx.tables.named_index("people"))

        ctx.delete_tables()
        assert store.list_tables() == []

    def test_without_any_tables(self, store: SqlAlchemyStore) -> None:
        _context(store).delete_tables()
