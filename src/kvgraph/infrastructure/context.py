"""GraphContext: the single dependency injected into every graph service.

Owns the store, the shared mutation writer, the element cache, and one
wrapper per backing table. Services never talk to the store directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kvgraph.config.models import KvGraphConfig, TableNames
from kvgraph.domain.errors import StoreUnavailableError
from kvgraph.domain.types import ElementKind
from kvgraph.infrastructure.cache import ElementCache
from kvgraph.infrastructure.tables import (
    EdgeTable,
    ElementTable,
    IndexedKeysTable,
    IndexNamesTable,
    KeyIndexTable,
    NamedIndexTable,
    VertexTable,
)
from kvgraph.infrastructure.writer import MutationWriter

if TYPE_CHECKING:
    from kvgraph.config.models import GraphConfig, QueryConfig
    from kvgraph.infrastructure.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class GraphContext:
    """Shared state for one open graph.

    Parameters:
        store: Backing sorted key-value store.
        config: Graph, writer, and query settings.
        writer: Override the writer (tests inject failing stores through it).
        cache: Override the element cache.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: KvGraphConfig | None = None,
        *,
        writer: MutationWriter | None = None,
        cache: ElementCache | None = None,
    ) -> None:
        self.config = config or KvGraphConfig()
        self.store = store
        self.writer = writer or MutationWriter(
            store, max_buffered=self.config.writer.max_buffered_mutations
        )
        self.cache = cache or ElementCache()
        self.tables = TableNames(prefix=self.config.graph.name)

        self.vertices = VertexTable(store, self.writer, self.tables.vertex)
        self.edges = EdgeTable(store, self.writer, self.tables.edge)
        self.vertex_key_index = KeyIndexTable(
            store, self.writer, self.tables.vertex_key_index, ElementKind.VERTEX
        )
        self.edge_key_index = KeyIndexTable(
            store, self.writer, self.tables.edge_key_index, ElementKind.EDGE
        )
        self.index_names = IndexNamesTable(store, self.writer, self.tables.index_names)
        self.indexed_keys = IndexedKeysTable(store, self.writer, self.tables.indexed_keys)

    @property
    def graph_config(self) -> GraphConfig:
        return self.config.graph

    @property
    def query_config(self) -> QueryConfig:
        return self.config.query

    def element_table(self, kind: ElementKind) -> ElementTable:
        return self.vertices if kind is ElementKind.VERTEX else self.edges

    def key_index(self, kind: ElementKind) -> KeyIndexTable:
        return self.vertex_key_index if kind is ElementKind.VERTEX else self.edge_key_index

    def named_index_table(self, index_name: str) -> NamedIndexTable:
        return NamedIndexTable(self.store, self.writer, self.tables.named_index(index_name))

    def checked_flush(self) -> None:
        self.writer.checked_flush()

    # ------------------------------------------------------------------
    # Table lifecycle
    # ------------------------------------------------------------------

    def prepare_tables(self) -> None:
        """Clear and/or create the base tables as the graph config asks.

        Raises:
            StoreUnavailableError: If a table is missing and creation is off.
        """
        cfg = self.graph_config
        if cfg.clear:
            self.delete_tables()
        for name in self.tables.base_tables():
            if self.store.table_exists(name):
                continue
            if not (cfg.create or cfg.clear):
                msg = f"Table {name} does not exist and table creation is disabled"
                raise StoreUnavailableError(msg, table=name)
            self.store.create_table(name)

    def delete_tables(self) -> None:
        """Drop every named index table, then every base table."""
        if self.store.table_exists(self.tables.index_names):
            for index_name, _ in self.index_names.entries():
                self.store.delete_table(self.tables.named_index(index_name))
        for name in self.tables.base_tables():
            self.store.delete_table(name)
        logger.info("Deleted all tables for graph %s", self.tables.prefix)
