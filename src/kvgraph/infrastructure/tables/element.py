"""ElementTable: shared row access for the vertex and edge tables.

One row per element, keyed by the UTF-8 element ID. The ``LABEL/EXISTS``
cell marks a live element; a row without it is treated as absent even
if stray property cells remain.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from kvgraph.domain.encoding import (
    ADJACENCY_FAMILIES,
    EMPTY,
    EXISTS,
    LABEL,
    decode_id,
    deserialize,
    encode_id,
    encode_key,
    serialize,
)
from kvgraph.infrastructure.store.base import Range
from kvgraph.infrastructure.tables.base import BaseTable

if TYPE_CHECKING:
    from kvgraph.domain.types import ElementKind
    from kvgraph.infrastructure.store.base import Cell, KeyValueStore
    from kvgraph.infrastructure.writer import MutationWriter


@dataclass
class RowSnapshot:
    """Decoded view of one element row."""

    element_id: str
    exists: bool = False
    label_cells: dict[bytes, bytes] = field(default_factory=dict)
    properties: dict[str, Any] = field(default_factory=dict)


def _snapshot(element_id: str, cells: Iterable[Cell]) -> RowSnapshot:
    snap = RowSnapshot(element_id)
    for cell in cells:
        if cell.family == LABEL:
            if cell.qualifier == EXISTS:
                snap.exists = True
            else:
                snap.label_cells[cell.qualifier] = cell.value
        elif cell.family in ADJACENCY_FAMILIES:
            continue
        elif cell.qualifier == EMPTY:
            snap.properties[cell.family.decode("utf-8")] = deserialize(cell.value)
    return snap


class ElementTable(BaseTable):
    """Row operations common to vertices and edges."""

    def __init__(
        self, store: KeyValueStore, writer: MutationWriter, name: str, kind: ElementKind
    ) -> None:
        super().__init__(store, writer, name)
        self.kind = kind

    # --- Reads ---

    def exists(self, element_id: str) -> bool:
        cells = self.scan(
            [Range.exact(encode_id(element_id))], columns=[(LABEL, EXISTS)], limit=1
        )
        return next(cells, None) is not None

    def read_row(self, element_id: str, keys: Iterable[str] = ()) -> RowSnapshot:
        """Read the LABEL family plus the property families named in *keys*."""
        families = [LABEL, *(encode_key(k) for k in keys)]
        cells = self.scan([Range.exact(encode_id(element_id))], families=families)
        return _snapshot(element_id, cells)

    def read_properties(
        self, element_id: str, keys: Iterable[str] = ()
    ) -> dict[str, Any] | None:
        """Return the requested properties, or None if the element does not exist."""
        snap = self.read_row(element_id, keys)
        return snap.properties if snap.exists else None

    def read_raw_property(self, element_id: str, key: str) -> bytes | None:
        cells = self.scan(
            [Range.exact(encode_id(element_id))], columns=[(encode_key(key), EMPTY)], limit=1
        )
        cell = next(cells, None)
        return None if cell is None else cell.value

    def read_property(self, element_id: str, key: str) -> Any:
        raw = self.read_raw_property(element_id, key)
        return None if raw is None else deserialize(raw)

    def read_property_keys(self, element_id: str) -> set[str]:
        return {
            cell.family.decode("utf-8")
            for cell in self.scan_row(encode_id(element_id))
            if cell.family != LABEL
            and cell.family not in ADJACENCY_FAMILIES
            and cell.qualifier == EMPTY
        }

    def element_ids(self) -> Iterator[str]:
        for cell in self.scan(columns=[(LABEL, EXISTS)]):
            yield decode_id(cell.row)

    def snapshots(self) -> Iterator[RowSnapshot]:
        """Every live row, decoded, in row-key order."""
        for row, cells in itertools.groupby(self.scan(), key=lambda c: c.row):
            snap = _snapshot(decode_id(row), cells)
            if snap.exists:
                yield snap

    def scan_family(self, key: str) -> Iterator[tuple[str, bytes]]:
        """Yield ``(element_id, raw_value)`` for every row holding *key*."""
        for cell in self.scan(families=[encode_key(key)]):
            if cell.qualifier == EMPTY:
                yield decode_id(cell.row), cell.value

    def ids_with_value(self, key: str, value: Any) -> list[str]:
        """Full-scan lookup: IDs whose stored *key* equals *value* byte-for-byte."""
        target = serialize(value)
        return [element_id for element_id, raw in self.scan_family(key) if raw == target]

    # --- Writes ---

    def write_existence(self, element_id: str) -> None:
        self.put(encode_id(element_id), LABEL, EXISTS, EMPTY)

    def write_property(self, element_id: str, key: str, value: Any) -> None:
        self.put(encode_id(element_id), encode_key(key), EMPTY, serialize(value))

    def clear_property(self, element_id: str, key: str) -> None:
        self.delete(encode_id(element_id), encode_key(key), EMPTY)

    def delete_rows(self, element_ids: Iterable[str]) -> int:
        ranges = [Range.exact(encode_id(i)) for i in dict.fromkeys(element_ids)]
        return self.delete_ranges(ranges)
