"""ElementCache: write-through cache of live element handles.

Keyed by ``(kind, id)``. Eviction is identity-based only: entries leave
the cache when the element is removed or the kind is cleared at shutdown.
There is no size or TTL bound.
"""

from __future__ import annotations

import threading
from typing import Protocol

from kvgraph.domain.types import ElementKind


class CachedElement(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def kind(self) -> ElementKind: ...


class ElementCache:
    """Thread-safe mapping of ``(kind, id)`` to element handles."""

    def __init__(self) -> None:
        self._entries: dict[tuple[ElementKind, str], CachedElement] = {}
        self._lock = threading.RLock()

    def cache(self, element: CachedElement) -> None:
        """Insert or overwrite the handle for *element*."""
        with self._lock:
            self._entries[(element.kind, element.id)] = element

    def retrieve(self, element_id: str, kind: ElementKind) -> CachedElement | None:
        """Return the cached handle, or None on a miss."""
        with self._lock:
            return self._entries.get((kind, element_id))

    def remove(self, element_id: str, kind: ElementKind) -> None:
        with self._lock:
            self._entries.pop((kind, element_id), None)

    def clear(self, kind: ElementKind | None = None) -> None:
        """Empty one kind's entries, or everything when *kind* is None."""
        with self._lock:
            if kind is None:
                self._entries.clear()
                return
            for key in [k for k in self._entries if k[0] == kind]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: tuple[ElementKind, str]) -> bool:
        with self._lock:
            return key in self._entries
