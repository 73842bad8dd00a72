"""NamedIndexTable: one backing table per manually maintained index."""

from __future__ import annotations

from kvgraph.domain.encoding import encode_id
from kvgraph.infrastructure.tables.key_index import ValueIndexTable


class NamedIndexTable(ValueIndexTable):
    def count(self, key: str, value: object) -> int:
        return len(self.lookup(key, value))

    def remove_element(self, element_id: str) -> int:
        """Delete every posting for *element_id*; returns how many were removed.

        Postings are keyed by value, so this is a full-table scan.
        """
        target = encode_id(element_id)
        removed = 0
        for cell in self.scan():
            if cell.qualifier == target:
                self.delete(cell.row, cell.family, cell.qualifier)
                removed += 1
        return removed
