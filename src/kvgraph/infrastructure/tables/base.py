"""BaseTable: one logical table reached through the shared writer.

Reads go straight to the store. Writes are enqueued on the shared
:class:`MutationWriter`; bulk deletes bypass it, so they flush first to
keep the write order intact.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from kvgraph.infrastructure.store.base import Range

if TYPE_CHECKING:
    from kvgraph.infrastructure.store.base import Cell, KeyValueStore
    from kvgraph.infrastructure.writer import MutationWriter


class BaseTable:
    def __init__(self, store: KeyValueStore, writer: MutationWriter, name: str) -> None:
        self._store = store
        self._writer = writer
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def scan(
        self,
        ranges: Iterable[Range] | None = None,
        *,
        families: Iterable[bytes] | None = None,
        columns: Iterable[tuple[bytes, bytes]] | None = None,
        limit: int | None = None,
    ) -> Iterator[Cell]:
        return self._store.scan(
            self._name, ranges, families=families, columns=columns, limit=limit
        )

    def scan_row(self, row: bytes) -> list[Cell]:
        return list(self.scan([Range.exact(row)]))

    def put(self, row: bytes, family: bytes, qualifier: bytes, value: bytes) -> None:
        self._writer.put(self._name, row, family, qualifier, value)

    def delete(self, row: bytes, family: bytes, qualifier: bytes) -> None:
        self._writer.delete(self._name, row, family, qualifier)

    def delete_ranges(self, ranges: Iterable[Range], *, families: Iterable[bytes] | None = None) -> int:
        self._writer.checked_flush()
        return self._store.delete_ranges(self._name, ranges, families=families)

    def is_empty(self) -> bool:
        return next(self.scan(limit=1), None) is None
