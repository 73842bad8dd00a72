"""IndexService: automatic key indexes and manually maintained named indexes.

Key indexes are maintained by the graph on every property write of an
indexed key. Named indexes are only changed through :class:`NamedIndex`
``put``/``remove`` calls (and cleaned on element removal).

INVARIANT: A lookup never returns an element that no longer exists.
Stale postings are skipped at resolution time, not repaired.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeAlias

from kvgraph.domain.errors import (
    AlreadyExistsError,
    IndexingDisabledError,
    IndexKindMismatchError,
    InvalidArgumentError,
    NotFoundError,
)
from kvgraph.domain.ids import validate_key
from kvgraph.domain.types import ElementKind
from kvgraph.services.base import BaseService

if TYPE_CHECKING:
    from kvgraph.infrastructure.context import GraphContext
    from kvgraph.infrastructure.tables import NamedIndexTable
    from kvgraph.services.elements import Element

logger = logging.getLogger(__name__)

Resolver: TypeAlias = "Callable[[ElementKind, str], Element | None]"


class NamedIndex:
    """Handle for one named index. Obtained from :meth:`IndexService.create_index`."""

    def __init__(
        self, name: str, kind: ElementKind, table: NamedIndexTable, service: IndexService
    ) -> None:
        self._name = name
        self._kind = kind
        self._table = table
        self._service = service

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> ElementKind:
        return self._kind

    def _check(self, key: Any, value: Any, element: Element | None = None) -> None:
        self._service.require_enabled()
        if not isinstance(key, str) or not key:
            raise InvalidArgumentError("Index key must be a non-empty string")
        if value is None:
            raise InvalidArgumentError("Index value can not be null", key=key)
        if element is not None and element.kind is not self._kind:
            msg = f"Index {self._name!r} holds {self._kind} elements, not {element.kind}"
            raise IndexKindMismatchError(msg, index=self._name)

    def put(self, key: str, value: Any, element: Element) -> None:
        self._check(key, value, element)
        self._table.add_entry(element.id, key, value)
        self._service.context.checked_flush()

    def get(self, key: str, value: Any) -> list[Element]:
        """Live elements posted under ``(key, value)``."""
        self._check(key, value)
        return self._service.resolve(self._kind, self._table.lookup(key, value))

    def count(self, key: str, value: Any) -> int:
        """Number of postings under ``(key, value)``, stale ones included."""
        self._check(key, value)
        return self._table.count(key, value)

    def remove(self, key: str, value: Any, element: Element) -> None:
        self._check(key, value, element)
        self._table.remove_entry(element.id, key, value)
        self._service.context.checked_flush()

    def __repr__(self) -> str:
        return f"NamedIndex({self._name!r}, {self._kind})"


class IndexService(BaseService):
    """Key-index and named-index management for one graph.

    Parameters:
        ctx: The graph context.
        resolver: Maps ``(kind, id)`` to a live element or None.
    """

    def __init__(self, ctx: GraphContext, resolver: Resolver) -> None:
        super().__init__(ctx)
        self._resolver = resolver

    # ------------------------------------------------------------------
    # Key indexes
    # ------------------------------------------------------------------

    def is_indexed(self, key: str, kind: ElementKind) -> bool:
        return self._cfg.auto_index or key in self._ctx.indexed_keys.keys(kind)

    def get_indexed_keys(self, kind: ElementKind | str) -> set[str]:
        return self._ctx.indexed_keys.keys(ElementKind.parse(kind))

    def create_key_index(self, key: str, kind: ElementKind | str) -> int:
        """Register *key* and index every existing value. Returns the entry count."""
        kind = ElementKind.parse(kind)
        validate_key(key)
        if key in self._ctx.indexed_keys.keys(kind):
            msg = f"Key {key!r} is already indexed for {kind}"
            raise AlreadyExistsError(msg, key=key, kind=str(kind))

        self._ctx.indexed_keys.register(key, kind)
        self._ctx.checked_flush()
        count = self._ctx.key_index(kind).rebuild(key, self._ctx.element_table(kind))
        self._ctx.checked_flush()
        logger.info("Created %s key index on %r (%d entries)", kind, key, count)
        return count

    def drop_key_index(self, key: str, kind: ElementKind | str) -> None:
        kind = ElementKind.parse(kind)
        validate_key(key)
        self._ctx.indexed_keys.unregister(key, kind)
        self._ctx.checked_flush()
        removed = self._ctx.key_index(kind).drop_key(key)
        logger.info("Dropped %s key index on %r (%d entries)", kind, key, removed)

    # ------------------------------------------------------------------
    # Named indexes
    # ------------------------------------------------------------------

    def require_enabled(self) -> None:
        if not self._cfg.named_indexes_enabled:
            raise IndexingDisabledError("Named indexes are disabled for this graph")

    def _handle(self, name: str, kind: ElementKind) -> NamedIndex:
        return NamedIndex(name, kind, self._ctx.named_index_table(name), self)

    @staticmethod
    def _validate_name(name: Any) -> str:
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("Index name must be a non-empty string")
        return name

    def create_index(self, name: str, kind: ElementKind | str) -> NamedIndex:
        self.require_enabled()
        name = self._validate_name(name)
        kind = ElementKind.parse(kind)
        registered = self._ctx.index_names.kinds_of(name)
        if registered:
            msg = f"Index {name!r} already exists"
            raise AlreadyExistsError(msg, index=name, kind=str(registered[0]))

        self._ctx.index_names.register(name, kind)
        self._ctx.checked_flush()
        self._ctx.store.create_table(self._ctx.tables.named_index(name))
        logger.info("Created %s index %r", kind, name)
        return self._handle(name, kind)

    def get_index(self, name: str, kind: ElementKind | str) -> NamedIndex | None:
        self.require_enabled()
        name = self._validate_name(name)
        kind = ElementKind.parse(kind)
        registered = self._ctx.index_names.kinds_of(name)
        if not registered:
            return None
        if kind not in registered:
            msg = f"Index {name!r} holds {registered[0]} elements, not {kind}"
            raise IndexKindMismatchError(msg, index=name)
        return self._handle(name, kind)

    def get_indices(self) -> list[NamedIndex]:
        self.require_enabled()
        return [self._handle(name, kind) for name, kind in self._ctx.index_names.entries()]

    def drop_index(self, name: str) -> None:
        self.require_enabled()
        name = self._validate_name(name)
        registered = self._ctx.index_names.kinds_of(name)
        if not registered:
            msg = f"Index {name!r} does not exist"
            raise NotFoundError(msg, index=name)
        for kind in registered:
            self._ctx.index_names.unregister(name, kind)
        self._ctx.checked_flush()
        self._ctx.store.delete_table(self._ctx.tables.named_index(name))
        logger.info("Dropped index %r", name)

    def remove_from_named_indexes(self, element_id: str, kind: ElementKind) -> None:
        """Delete every posting of the element from each index of its kind."""
        for name, index_kind in self._ctx.index_names.entries():
            if index_kind is not kind:
                continue
            removed = self._ctx.named_index_table(name).remove_element(element_id)
            if removed:
                logger.debug("Removed %d posting(s) of %s from index %r", removed, element_id, name)
        self._ctx.checked_flush()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, kind: ElementKind, element_ids: Iterable[str]) -> list[Element]:
        """Map IDs to live elements in order, skipping IDs that no longer exist."""
        ids = list(dict.fromkeys(element_ids))
        workers = min(self._ctx.query_config.query_threads, len(ids))
        if workers <= 1 or not self._ctx.store.concurrent_reads:
            found = [self._resolver(kind, element_id) for element_id in ids]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kvgraph-query") as pool:
                found = list(pool.map(lambda element_id: self._resolver(kind, element_id), ids))
        stale = found.count(None)
        if stale:
            logger.debug("Skipped %d stale %s index posting(s)", stale, kind)
        return [element for element in found if element is not None]
