"""Contract for the sorted key-value store the graph is mapped onto.

The store offers only what a distributed sorted table store offers:
row-ranged scans with column fetch filters, a batched mutation path, bulk
ranged deletes, and table administration. There are no multi-row
transactions and no secondary indexes; the graph layer builds those.

Cells are ``(row, family, qualifier, value)`` byte tuples and scans return
them sorted by ``(row, family, qualifier)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import NamedTuple


class Cell(NamedTuple):
    row: bytes
    family: bytes
    qualifier: bytes
    value: bytes


@dataclass(frozen=True)
class Range:
    """Inclusive row range; ``None`` on either side means unbounded."""

    start: bytes | None = None
    stop: bytes | None = None

    @classmethod
    def exact(cls, row: bytes) -> Range:
        return cls(start=row, stop=row)

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.stop is None

    def contains(self, row: bytes) -> bool:
        if self.start is not None and row < self.start:
            return False
        return not (self.stop is not None and row > self.stop)


@dataclass(frozen=True)
class ColumnUpdate:
    """One put (``value`` set) or delete (``value`` is None) within a row."""

    family: bytes
    qualifier: bytes
    value: bytes | None = None

    @property
    def is_delete(self) -> bool:
        return self.value is None


@dataclass
class Mutation:
    """Ordered column updates against a single row."""

    row: bytes
    updates: list[ColumnUpdate] = field(default_factory=list)

    def put(self, family: bytes, qualifier: bytes, value: bytes) -> Mutation:
        self.updates.append(ColumnUpdate(family, qualifier, value))
        return self

    def delete(self, family: bytes, qualifier: bytes) -> Mutation:
        self.updates.append(ColumnUpdate(family, qualifier, None))
        return self

    def __len__(self) -> int:
        return len(self.updates)


class KeyValueStore(ABC):
    """Abstract sorted key-value store.

    Implementations raise :class:`~kvgraph.domain.errors.StoreUnavailableError`
    for administrative/connection failures and
    :class:`~kvgraph.domain.errors.MutationsRejectedError` when a batch or
    bulk delete is refused.
    """

    #: Whether scans may run from several threads at once.
    concurrent_reads: bool = True

    # --- Administration ---

    @abstractmethod
    def table_exists(self, name: str) -> bool: ...

    @abstractmethod
    def create_table(self, name: str) -> None:
        """Create *name* if it does not exist."""

    @abstractmethod
    def delete_table(self, name: str) -> None:
        """Drop *name* if it exists."""

    @abstractmethod
    def list_tables(self) -> list[str]: ...

    # --- Reads ---

    @abstractmethod
    def scan(
        self,
        name: str,
        ranges: Iterable[Range] | None = None,
        *,
        families: Iterable[bytes] | None = None,
        columns: Iterable[tuple[bytes, bytes]] | None = None,
        limit: int | None = None,
    ) -> Iterator[Cell]:
        """Yield cells of *name* in sorted order.

        Args:
            ranges: Row ranges to read; None reads the whole table.
            families: Only return cells in these column families.
            columns: Only return these exact ``(family, qualifier)`` columns.
            limit: Stop after this many cells.
        """

    # --- Writes ---

    @abstractmethod
    def apply(self, name: str, mutations: list[Mutation]) -> None:
        """Apply one batch of mutations to *name*."""

    @abstractmethod
    def delete_ranges(
        self,
        name: str,
        ranges: Iterable[Range],
        *,
        families: Iterable[bytes] | None = None,
    ) -> int:
        """Bulk-delete every cell in *ranges* (optionally only *families*).

        Returns the number of cells removed.
        """

    def close(self) -> None:  # noqa: B027
        """Release connections. Default: nothing to release."""
