"""BaseService: foundation for the graph-layer services.

Every service receives a :class:`GraphContext` at construction time. The
context provides the table wrappers, the shared writer, and the cache;
services never hold their own store references.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kvgraph.config.models import GraphConfig
    from kvgraph.infrastructure.context import GraphContext


class BaseService:
    """Base for service-layer classes.

    Usage::

        class IndexService(BaseService):
            def create_key_index(self, key: str, kind: ElementKind) -> None:
                self._ctx.indexed_keys.register(key, kind)
                self._ctx.checked_flush()
    """

    def __init__(self, ctx: GraphContext) -> None:
        self._ctx = ctx

    @property
    def context(self) -> GraphContext:
        return self._ctx

    @property
    def _cfg(self) -> GraphConfig:
        return self._ctx.graph_config
