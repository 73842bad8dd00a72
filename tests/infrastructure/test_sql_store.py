"""Tests for the SQLAlchemy-backed sorted key-value store."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import text

from kvgraph.domain.errors import MutationsRejectedError, StoreUnavailableError
from kvgraph.infrastructure.store import Mutation, Range, SqlAlchemyStore, create_store_engine


@pytest.fixture
def table(store: SqlAlchemyStore) -> str:
    store.create_table("cells")
    return "cells"


def _put(store: SqlAlchemyStore, name: str, *cells: tuple[bytes, bytes, bytes, bytes]) -> None:
    store.apply(name, [Mutation(row).put(fam, qual, val) for row, fam, qual, val in cells])


class TestCreateStoreEngine:
    def test_wal_mode_for_files(self, tmp_path: Path) -> None:
        engine = create_store_engine(f"sqlite:///{tmp_path / 'wal.db'}")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        engine.dispose()

    def test_in_memory_shares_connection(self) -> None:
        store = SqlAlchemyStore(create_store_engine("sqlite://"))
        store.create_table("t")
        assert store.table_exists("t")
        assert store.concurrent_reads is False
        store.close()

    def test_file_store_allows_concurrent_reads(self, store: SqlAlchemyStore) -> None:
        assert store.concurrent_reads is True

    def test_bad_url(self) -> None:
        with pytest.raises(StoreUnavailableError):
            create_store_engine("nosuchdialect://x")


class TestTableAdmin:
    def test_create_and_list(self, store: SqlAlchemyStore) -> None:
        store.create_table("b")
        store.create_table("a")
        assert store.list_tables() == ["a", "b"]

    def test_create_is_idempotent(self, store: SqlAlchemyStore, table: str) -> None:
        store.create_table(table)
        assert store.table_exists(table)

    def test_delete(self, store: SqlAlchemyStore, table: str) -> None:
        store.delete_table(table)
        assert not store.table_exists(table)

    def test_delete_missing_is_noop(self, store: SqlAlchemyStore) -> None:
        store.delete_table("never_created")

    def test_recreate_after_delete_is_empty(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"r", b"f", b"", b"v"))
        store.delete_table(table)
        store.create_table(table)
        assert list(store.scan(table)) == []


class TestScan:
    def test_sorted_bytewise(self, store: SqlAlchemyStore, table: str) -> None:
        _put(
            store,
            table,
            (b"b", b"f", b"", b"2"),
            (b"a", b"g", b"", b"3"),
            (b"a", b"f", b"q2", b"1"),
            (b"a", b"f", b"q1", b"0"),
            (b"\xff", b"f", b"", b"4"),
        )
        cells = list(store.scan(table))
        assert [(c.row, c.family, c.qualifier) for c in cells] == [
            (b"a", b"f", b"q1"),
            (b"a", b"f", b"q2"),
            (b"a", b"g", b""),
            (b"b", b"f", b""),
            (b"\xff", b"f", b""),
        ]

    def test_exact_range(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"1"), (b"ab", b"f", b"", b"2"))
        cells = list(store.scan(table, [Range.exact(b"a")]))
        assert [c.row for c in cells] == [b"a"]

    def test_bounded_range(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, *[(bytes([c]), b"f", b"", b"v") for c in b"abcde"])
        cells = list(store.scan(table, [Range(b"b", b"d")]))
        assert [c.row for c in cells] == [b"b", b"c", b"d"]

    def test_multiple_ranges(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, *[(bytes([c]), b"f", b"", b"v") for c in b"abcde"])
        cells = list(store.scan(table, [Range.exact(b"a"), Range.exact(b"e")]))
        assert [c.row for c in cells] == [b"a", b"e"]

    def test_empty_range_list_matches_nothing(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"v"))
        assert list(store.scan(table, [])) == []

    def test_family_filter(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"1"), (b"a", b"g", b"", b"2"))
        cells = list(store.scan(table, families=[b"g"]))
        assert [c.value for c in cells] == [b"2"]

    def test_column_filter(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"x", b"1"), (b"a", b"f", b"y", b"2"))
        cells = list(store.scan(table, columns=[(b"f", b"y")]))
        assert [c.value for c in cells] == [b"2"]

    def test_limit(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, *[(bytes([c]), b"f", b"", b"v") for c in b"abc"])
        assert len(list(store.scan(table, limit=2))) == 2

    def test_missing_table(self, store: SqlAlchemyStore) -> None:
        with pytest.raises(StoreUnavailableError):
            list(store.scan("missing"))


class TestApply:
    def test_upsert_overwrites(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"old"))
        _put(store, table, (b"a", b"f", b"", b"new"))
        assert [c.value for c in store.scan(table)] == [b"new"]

    def test_delete_cell(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"v"), (b"a", b"g", b"", b"w"))
        store.apply(table, [Mutation(b"a").delete(b"f", b"")])
        assert [c.family for c in store.scan(table)] == [b"g"]

    def test_updates_applied_in_order(self, store: SqlAlchemyStore, table: str) -> None:
        mutation = Mutation(b"a").put(b"f", b"", b"1").delete(b"f", b"").put(b"f", b"", b"2")
        store.apply(table, [mutation])
        assert [c.value for c in store.scan(table)] == [b"2"]

    def test_rejected_batch(self, store: SqlAlchemyStore) -> None:
        with pytest.raises(MutationsRejectedError) as exc_info:
            store.apply("missing", [Mutation(b"a").put(b"f", b"", b"v")])
        assert exc_info.value.detail["table"] == "missing"
        assert exc_info.value.detail["count"] == 1

    def test_empty_batch_is_noop(self, store: SqlAlchemyStore) -> None:
        store.apply("missing", [])


class TestDeleteRanges:
    def test_delete_rows(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"1"), (b"a", b"g", b"", b"2"), (b"b", b"f", b"", b"3"))
        removed = store.delete_ranges(table, [Range.exact(b"a")])
        assert removed == 2
        assert [c.row for c in store.scan(table)] == [b"b"]

    def test_delete_family_everywhere(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"1"), (b"a", b"g", b"", b"2"), (b"b", b"f", b"", b"3"))
        removed = store.delete_ranges(table, [Range()], families=[b"f"])
        assert removed == 2
        assert [(c.row, c.family) for c in store.scan(table)] == [(b"a", b"g")]

    def test_no_ranges(self, store: SqlAlchemyStore, table: str) -> None:
        _put(store, table, (b"a", b"f", b"", b"1"))
        assert store.delete_ranges(table, []) == 0
        assert len(list(store.scan(table))) == 1
