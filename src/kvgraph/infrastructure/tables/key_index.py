"""Value-index tables: key indexes and (via subclass) named indexes.

Layout, one cell per indexed ``(element, key, value)``::

    row = serialize(value)   family = key   qualifier = element ID   value = EMPTY

A lookup is a single-row scan restricted to one family.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from kvgraph.domain.encoding import EMPTY, decode_id, encode_id, encode_key, serialize
from kvgraph.infrastructure.store.base import Range
from kvgraph.infrastructure.tables.base import BaseTable

if TYPE_CHECKING:
    from kvgraph.domain.types import ElementKind
    from kvgraph.infrastructure.store.base import KeyValueStore
    from kvgraph.infrastructure.tables.element import ElementTable
    from kvgraph.infrastructure.writer import MutationWriter

logger = logging.getLogger(__name__)


class ValueIndexTable(BaseTable):
    """``value -> key -> element ID`` postings."""

    def add_raw(self, element_id: str, key: str, raw_value: bytes) -> None:
        self.put(raw_value, encode_key(key), encode_id(element_id), EMPTY)

    def remove_raw(self, element_id: str, key: str, raw_value: bytes) -> None:
        self.delete(raw_value, encode_key(key), encode_id(element_id))

    def add_entry(self, element_id: str, key: str, value: Any) -> None:
        self.add_raw(element_id, key, serialize(value))

    def remove_entry(self, element_id: str, key: str, value: Any) -> None:
        self.remove_raw(element_id, key, serialize(value))

    def lookup(self, key: str, value: Any) -> list[str]:
        """Element IDs posted under ``(key, value)``, in ID order."""
        cells = self.scan([Range.exact(serialize(value))], families=[encode_key(key)])
        return [decode_id(cell.qualifier) for cell in cells]


class KeyIndexTable(ValueIndexTable):
    """Automatic index for one element kind, maintained on every property write."""

    def __init__(
        self, store: KeyValueStore, writer: MutationWriter, name: str, kind: ElementKind
    ) -> None:
        super().__init__(store, writer, name)
        self.kind = kind

    def rebuild(self, key: str, source: ElementTable) -> int:
        """Post every existing *key* value in *source*. Returns the entry count."""
        count = 0
        for element_id, raw in source.scan_family(key):
            self.add_raw(element_id, key, raw)
            count += 1
        logger.debug("Indexed %d existing %s value(s) for key %r", count, self.kind, key)
        return count

    def drop_key(self, key: str) -> int:
        """Bulk-delete every entry for *key*, across all rows."""
        return self.delete_ranges([Range()], families=[encode_key(key)])
