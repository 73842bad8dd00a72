"""Sorted key-value store contract and the SQLAlchemy Core adapter."""

from kvgraph.infrastructure.store.base import Cell, ColumnUpdate, KeyValueStore, Mutation, Range
from kvgraph.infrastructure.store.sql_store import SqlAlchemyStore, create_store_engine

__all__ = [
    "Cell",
    "ColumnUpdate",
    "KeyValueStore",
    "Mutation",
    "Range",
    "SqlAlchemyStore",
    "create_store_engine",
]
