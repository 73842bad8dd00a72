"""MutationWriter: one buffered writer shared across every backing table.

Individual ``put``/``delete``/``add`` calls only enqueue. A flush drains
every table's buffer into the store, one batch per table, in the order
tables were first written to. Callers force a flush with
:meth:`MutationWriter.checked_flush` after any graph mutation that a later
read in the same call depends on.

A rejected batch is dropped from the buffer and surfaced as
:class:`MutationsRejectedError`; the writer never retries.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from kvgraph.domain.errors import GraphError, MutationsRejectedError, StoreUnavailableError
from kvgraph.infrastructure.store.base import Mutation

if TYPE_CHECKING:
    from kvgraph.infrastructure.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class MutationWriter:
    """Concurrency-safe buffered writer over a :class:`KeyValueStore`.

    Parameters:
        store: The backing store batches are applied to.
        max_buffered: Buffered mutation count that triggers an automatic flush.
    """

    def __init__(self, store: KeyValueStore, *, max_buffered: int = 1000) -> None:
        self._store = store
        self._max_buffered = max_buffered
        self._buffers: dict[str, list[Mutation]] = {}
        self._pending = 0
        self._closed = False
        # Reentrant: an enqueue that crosses the threshold flushes while holding it.
        self._lock = threading.RLock()

    @property
    def pending(self) -> int:
        """Number of buffered, not yet applied mutations."""
        with self._lock:
            return self._pending

    # ------------------------------------------------------------------
    # Enqueue
    # ------------------------------------------------------------------

    def add(self, table: str, mutation: Mutation) -> None:
        """Buffer *mutation* for *table*."""
        if not mutation.updates:
            return
        with self._lock:
            if self._closed:
                raise StoreUnavailableError("Mutation writer is closed")
            self._buffers.setdefault(table, []).append(mutation)
            self._pending += 1
            if self._pending >= self._max_buffered:
                self._flush_locked()

    def put(self, table: str, row: bytes, family: bytes, qualifier: bytes, value: bytes) -> None:
        self.add(table, Mutation(row).put(family, qualifier, value))

    def delete(self, table: str, row: bytes, family: bytes, qualifier: bytes) -> None:
        self.add(table, Mutation(row).delete(family, qualifier))

    # ------------------------------------------------------------------
    # Flush
    # ------------------------------------------------------------------

    def flush(self) -> None:
        """Apply every buffered mutation."""
        with self._lock:
            self._flush_locked()

    def checked_flush(self) -> None:
        """Flush, surfacing any store failure as :class:`MutationsRejectedError`."""
        try:
            self.flush()
        except MutationsRejectedError:
            raise
        except GraphError as exc:
            raise MutationsRejectedError(str(exc), **exc.detail) from exc

    def _flush_locked(self) -> None:
        if not self._pending:
            return
        batches = list(self._buffers.items())
        self._buffers = {}
        self._pending = 0
        for i, (table, mutations) in enumerate(batches):
            try:
                self._store.apply(table, mutations)
            except GraphError:
                logger.warning(
                    "Batch of %d mutation(s) for %s rejected; dropped", len(mutations), table
                )
                # Batches not yet attempted stay buffered for the next flush.
                for later_table, later in batches[i + 1 :]:
                    self._buffers.setdefault(later_table, []).extend(later)
                    self._pending += len(later)
                raise
            logger.debug("Flushed %d mutation(s) to %s", len(mutations), table)

    def close(self) -> None:
        """Flush outstanding mutations and refuse further writes."""
        with self._lock:
            if self._closed:
                return
            try:
                self._flush_locked()
            finally:
                self._closed = True

    def reopen(self) -> None:
        """Accept writes again after :meth:`close` (used by ``Graph.clear``)."""
        with self._lock:
            self._closed = False
