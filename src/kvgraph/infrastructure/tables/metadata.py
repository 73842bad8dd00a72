"""Metadata tables: registered named indexes and indexed keys.

Both use ``row = name``, ``family = element kind``, empty qualifier and
value. A name may be registered once per kind.
"""

from __future__ import annotations

from kvgraph.domain.encoding import EMPTY, decode_id, encode_id
from kvgraph.domain.types import ElementKind
from kvgraph.infrastructure.store.base import Range
from kvgraph.infrastructure.tables.base import BaseTable


def _family(kind: ElementKind) -> bytes:
    return kind.value.encode("ascii")


class MetadataTable(BaseTable):
    def register(self, name: str, kind: ElementKind) -> None:
        self.put(encode_id(name), _family(kind), EMPTY, EMPTY)

    def unregister(self, name: str, kind: ElementKind) -> None:
        self.delete(encode_id(name), _family(kind), EMPTY)

    def kinds_of(self, name: str) -> list[ElementKind]:
        return [
            ElementKind(cell.family.decode("ascii"))
            for cell in self.scan([Range.exact(encode_id(name))])
        ]

    def entries(self) -> list[tuple[str, ElementKind]]:
        return [
            (decode_id(cell.row), ElementKind(cell.family.decode("ascii")))
            for cell in self.scan()
        ]


class IndexNamesTable(MetadataTable):
    """Named index registry: ``index name -> element kind``."""


class IndexedKeysTable(MetadataTable):
    """Key-index registry: ``property key -> element kind``."""

    def keys(self, kind: ElementKind) -> set[str]:
        return {
            decode_id(cell.row) for cell in self.scan(families=[_family(kind)])
        }
