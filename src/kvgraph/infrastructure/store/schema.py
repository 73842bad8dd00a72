"""SQLAlchemy Core table definition for one logical key-value table.

Every logical table (vertex, edge, key indexes, metadata, each named
index) is a separate SQL table with the same four BLOB columns. The
composite primary key gives sorted ``(row_key, family, qualifier)`` order;
SQLite compares BLOBs with memcmp, so ordering is byte-wise.
"""

from __future__ import annotations

from sqlalchemy import Column, LargeBinary, MetaData, Table


def cell_table(name: str, metadata: MetaData) -> Table:
    """Define (but do not create) the cell table called *name*."""
    return Table(
        name,
        metadata,
        Column("row_key", LargeBinary, primary_key=True),
        Column("family", LargeBinary, primary_key=True),
        Column("qualifier", LargeBinary, primary_key=True),
        Column("value", LargeBinary, nullable=False),
    )
