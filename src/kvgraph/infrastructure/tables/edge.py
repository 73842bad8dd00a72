"""EdgeTable: edge rows: existence, label, endpoints, properties."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from kvgraph.domain.encoding import (
    EMPTY,
    ENDPOINTS,
    EXISTS,
    LABEL,
    decode_id,
    deserialize,
    encode_id,
    serialize,
)
from kvgraph.domain.errors import DecodingError
from kvgraph.domain.types import ElementKind
from kvgraph.infrastructure.store.base import Mutation, Range
from kvgraph.infrastructure.tables.element import ElementTable, RowSnapshot

if TYPE_CHECKING:
    from kvgraph.infrastructure.store.base import KeyValueStore
    from kvgraph.infrastructure.writer import MutationWriter


@dataclass
class EdgeRecord:
    edge_id: str
    label: str
    out_id: str
    in_id: str
    properties: dict[str, Any] = field(default_factory=dict)


def _record(snap: RowSnapshot) -> EdgeRecord:
    try:
        label = deserialize(snap.label_cells[EMPTY])
        out_id, in_id = deserialize(snap.label_cells[ENDPOINTS])
    except (KeyError, TypeError, ValueError) as exc:
        msg = f"Edge row {snap.element_id!r} is missing its label or endpoints"
        raise DecodingError(msg, edge_id=snap.element_id) from exc
    return EdgeRecord(snap.element_id, str(label), str(out_id), str(in_id), snap.properties)


class EdgeTable(ElementTable):
    def __init__(self, store: KeyValueStore, writer: MutationWriter, name: str) -> None:
        super().__init__(store, writer, name, ElementKind.EDGE)

    def write_edge(self, edge_id: str, out_id: str, in_id: str, label: str) -> None:
        """Enqueue the existence marker, label, and endpoints as one row mutation."""
        mutation = (
            Mutation(encode_id(edge_id))
            .put(LABEL, EXISTS, EMPTY)
            .put(LABEL, EMPTY, serialize(label))
            .put(LABEL, ENDPOINTS, serialize([out_id, in_id]))
        )
        self._writer.add(self.name, mutation)

    def read_edge(self, edge_id: str, keys: Iterable[str] = ()) -> EdgeRecord | None:
        """Label, endpoints, and the properties named in *keys*; None if absent."""
        snap = self.read_row(edge_id, keys)
        if not snap.exists:
            return None
        return _record(snap)

    def records(self) -> Iterator[EdgeRecord]:
        for snap in self.snapshots():
            yield _record(snap)

    def ids_with_label(self, label: Any) -> list[str]:
        """Full scan of the label column; byte comparison like any property."""
        target = serialize(label)
        return [
            decode_id(cell.row)
            for cell in self.scan(columns=[(LABEL, EMPTY)])
            if cell.value == target
        ]

    def read_label(self, edge_id: str) -> str | None:
        cells = self.scan([Range.exact(encode_id(edge_id))], columns=[(LABEL, EMPTY)], limit=1)
        cell = next(cells, None)
        return None if cell is None else str(deserialize(cell.value))

    def read_endpoints(self, edge_id: str) -> tuple[str, str] | None:
        """``(out_id, in_id)`` from the endpoints cell, or None if absent."""
        cells = self.scan(
            [Range.exact(encode_id(edge_id))], columns=[(LABEL, ENDPOINTS)], limit=1
        )
        cell = next(cells, None)
        if cell is None:
            return None
        out_id, in_id = deserialize(cell.value)
        return str(out_id), str(in_id)
