"""Typed wrappers over the logical tables of one graph."""

from kvgraph.infrastructure.tables.edge import EdgeRecord, EdgeTable
from kvgraph.infrastructure.tables.element import ElementTable, RowSnapshot
from kvgraph.infrastructure.tables.key_index import KeyIndexTable, ValueIndexTable
from kvgraph.infrastructure.tables.metadata import IndexedKeysTable, IndexNamesTable
from kvgraph.infrastructure.tables.named_index import NamedIndexTable
from kvgraph.infrastructure.tables.vertex import AdjacencyEntry, VertexTable

__all__ = [
    "AdjacencyEntry",
    "EdgeRecord",
    "EdgeTable",
    "ElementTable",
    "IndexNamesTable",
    "IndexedKeysTable",
    "KeyIndexTable",
    "NamedIndexTable",
    "RowSnapshot",
    "ValueIndexTable",
    "VertexTable",
]
