"""Sorted key-value store on SQLAlchemy Core.

SQLite is the default engine: WAL mode for concurrent readers, one SQL
table per logical table, upserts via ``INSERT ... ON CONFLICT``. Each
``apply`` call runs in one SQL transaction, which matches the per-batch
(not cross-batch) atomicity a distributed store gives.

SQLAlchemy Core (not ORM) is used because cells are plain byte tuples;
there is nothing to map.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    MetaData,
    and_,
    create_engine,
    delete,
    event,
    false,
    inspect,
    or_,
    select,
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from kvgraph.domain.errors import MutationsRejectedError, StoreUnavailableError
from kvgraph.infrastructure.store.base import Cell, KeyValueStore, Mutation, Range
from kvgraph.infrastructure.store.schema import cell_table

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Table
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def create_store_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine for *url*.

    File-backed SQLite gets WAL mode; in-memory SQLite gets a single
    shared connection so every thread sees the same database.
    """
    sa_url = make_url(url)
    kwargs: dict[str, Any] = {}
    is_sqlite = sa_url.get_backend_name() == "sqlite"
    in_memory = is_sqlite and sa_url.database in (None, "", ":memory:")
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if in_memory:
            kwargs["poolclass"] = StaticPool

    try:
        engine = create_engine(sa_url, echo=echo, **kwargs)
    except SQLAlchemyError as exc:
        raise StoreUnavailableError(f"Cannot create engine for {url}: {exc}") from exc

    if is_sqlite and not in_memory:

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


class SqlAlchemyStore(KeyValueStore):
    """:class:`KeyValueStore` backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._metadata = MetaData()
        self._lock = threading.Lock()
        # One shared connection (in-memory SQLite) must not be used concurrently.
        self.concurrent_reads = not isinstance(engine.pool, StaticPool)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _table(self, name: str) -> Table:
        with self._lock:
            table = self._metadata.tables.get(name)
            if table is None:
                table = cell_table(name, self._metadata)
            return table

    def _insert(self, table: Table) -> Any:
        if self._engine.dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert
        return insert(table)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def table_exists(self, name: str) -> bool:
        try:
            return inspect(self._engine).has_table(name)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Cannot inspect table {name}: {exc}") from exc

    def create_table(self, name: str) -> None:
        try:
            self._table(name).create(self._engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Cannot create table {name}: {exc}") from exc
        logger.debug("Created table %s", name)

    def delete_table(self, name: str) -> None:
        table = self._table(name)
        try:
            table.drop(self._engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Cannot delete table {name}: {exc}") from exc
        with self._lock:
            self._metadata.remove(table)
        logger.debug("Deleted table %s", name)

    def list_tables(self) -> list[str]:
        try:
            return sorted(inspect(self._engine).get_table_names())
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Cannot list tables: {exc}") from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def _range_clause(table: Table, rng: Range) -> ColumnElement[bool]:
        clauses = []
        if rng.start is not None:
            clauses.append(table.c.row_key >= rng.start)
        if rng.stop is not None:
            clauses.append(table.c.row_key <= rng.stop)
        return and_(*clauses)

    def _filters(
        self,
        table: Table,
        ranges: Iterable[Range] | None,
        families: Iterable[bytes] | None,
        columns: Iterable[tuple[bytes, bytes]] | None = None,
    ) -> list[ColumnElement[bool]]:
        filters: list[ColumnElement[bool]] = []
        if ranges is not None:
            ranges = list(ranges)
            if not ranges:
                filters.append(false())
            elif not any(r.is_unbounded for r in ranges):
                filters.append(or_(*(self._range_clause(table, r) for r in ranges)))
        if families is not None:
            filters.append(table.c.family.in_(list(families)))
        if columns is not None:
            columns = list(columns)
            if not columns:
                filters.append(false())
            else:
                filters.append(
                    or_(
                        *(
                            and_(table.c.family == fam, table.c.qualifier == qual)
                            for fam, qual in columns
                        )
                    )
                )
        return filters

    def scan(
        self,
        name: str,
        ranges: Iterable[Range] | None = None,
        *,
        families: Iterable[bytes] | None = None,
        columns: Iterable[tuple[bytes, bytes]] | None = None,
        limit: int | None = None,
    ) -> Iterator[Cell]:
        table = self._table(name)
        stmt = (
            select(table.c.row_key, table.c.family, table.c.qualifier, table.c.value)
            .where(*self._filters(table, ranges, families, columns))
            .order_by(table.c.row_key, table.c.family, table.c.qualifier)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Scan of {name} failed: {exc}") from exc
        return iter(
            [Cell(bytes(row), bytes(fam), bytes(qual), bytes(val)) for row, fam, qual, val in rows]
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def apply(self, name: str, mutations: list[Mutation]) -> None:
        if not mutations:
            return
        table = self._table(name)
        pk = [table.c.row_key, table.c.family, table.c.qualifier]
        try:
            with self._engine.begin() as conn:
                for mutation in mutations:
                    for upd in mutation.updates:
                        if upd.is_delete:
                            conn.execute(
                                delete(table).where(
                                    table.c.row_key == mutation.row,
                                    table.c.family == upd.family,
                                    table.c.qualifier == upd.qualifier,
                                )
                            )
                        else:
                            stmt = self._insert(table).values(
                                row_key=mutation.row,
                                family=upd.family,
                                qualifier=upd.qualifier,
                                value=upd.value,
                            )
                            conn.execute(
                                stmt.on_conflict_do_update(
                                    index_elements=pk,
                                    set_={"value": stmt.excluded.value},
                                )
                            )
        except SQLAlchemyError as exc:
            msg = f"{len(mutations)} mutation(s) rejected by table {name}: {exc}"
            raise MutationsRejectedError(msg, table=name, count=len(mutations)) from exc

    def delete_ranges(
        self,
        name: str,
        ranges: Iterable[Range],
        *,
        families: Iterable[bytes] | None = None,
    ) -> int:
        ranges = list(ranges)
        if not ranges:
            return 0
        table = self._table(name)
        stmt = delete(table).where(*self._filters(table, ranges, families))
        try:
            with self._engine.begin() as conn:
                result = conn.execute(stmt)
        except SQLAlchemyError as exc:
            msg = f"Bulk delete on table {name} rejected: {exc}"
            raise MutationsRejectedError(msg, table=name) from exc
        return int(result.rowcount or 0)

    def close(self) -> None:
        self._engine.dispose()
