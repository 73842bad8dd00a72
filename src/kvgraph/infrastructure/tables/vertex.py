"""VertexTable: vertex rows and their mirrored adjacency entries."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, NamedTuple

from kvgraph.domain.encoding import (
    IN_EDGE,
    OUT_EDGE,
    compose_adjacency,
    decode_adjacency_value,
    decompose_adjacency,
    direction_of,
    encode_adjacency_value,
    encode_id,
)
from kvgraph.domain.types import Direction, ElementKind
from kvgraph.infrastructure.store.base import Range
from kvgraph.infrastructure.tables.element import ElementTable

if TYPE_CHECKING:
    from kvgraph.infrastructure.store.base import KeyValueStore
    from kvgraph.infrastructure.writer import MutationWriter


class AdjacencyEntry(NamedTuple):
    """One adjacency cell as seen from the vertex that owns it."""

    direction: Direction
    edge_id: str
    other_id: str
    label: str


class VertexTable(ElementTable):
    def __init__(self, store: KeyValueStore, writer: MutationWriter, name: str) -> None:
        super().__init__(store, writer, name, ElementKind.VERTEX)

    def write_vertex(self, vertex_id: str) -> None:
        self.write_existence(vertex_id)

    def write_edge_endpoints(self, edge_id: str, out_id: str, in_id: str, label: str) -> None:
        """Write the OUT entry on the tail and the mirrored IN entry on the head."""
        value = encode_adjacency_value(edge_id, label)
        self.put(encode_id(out_id), OUT_EDGE, compose_adjacency(in_id, edge_id), value)
        self.put(encode_id(in_id), IN_EDGE, compose_adjacency(out_id, edge_id), value)

    def delete_edge_endpoints(self, edge_id: str, out_id: str, in_id: str) -> None:
        self.delete(encode_id(out_id), OUT_EDGE, compose_adjacency(in_id, edge_id))
        self.delete(encode_id(in_id), IN_EDGE, compose_adjacency(out_id, edge_id))

    def read_adjacency(
        self,
        vertex_id: str,
        direction: Direction = Direction.BOTH,
        labels: Iterable[str] = (),
    ) -> list[AdjacencyEntry]:
        """Adjacency entries for *vertex_id*, optionally filtered by edge label.

        OUT entries precede IN entries for BOTH; within a direction entries
        are in qualifier order.
        """
        if direction is Direction.BOTH:
            families = [OUT_EDGE, IN_EDGE]
        elif direction is Direction.OUT:
            families = [OUT_EDGE]
        else:
            families = [IN_EDGE]
        wanted = set(labels)

        entries: dict[bytes, list[AdjacencyEntry]] = {fam: [] for fam in families}
        for cell in self.scan([Range.exact(encode_id(vertex_id))], families=families):
            other_id, edge_id = decompose_adjacency(cell.qualifier)
            _, label = decode_adjacency_value(cell.value)
            if wanted and label not in wanted:
                continue
            entries[cell.family].append(
                AdjacencyEntry(direction_of(cell.family), edge_id, other_id, label)
            )
        return [entry for fam in families for entry in entries[fam]]
