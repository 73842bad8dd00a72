"""Error taxonomy for graph operations.

Every error carries a stable ``code`` string so the CLI can emit a
structured error payload without inspecting exception types.

Recoverable: NotFound, AlreadyExists, InvalidArgument (and subclasses),
IndexingDisabled.  Unrecoverable: Encoding/Decoding (store corruption),
MutationsRejected, StoreUnavailable.
"""

from __future__ import annotations

from typing import Any


class GraphError(Exception):
    """Base class for all kvgraph errors."""

    code = "GRAPH_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class NotFoundError(GraphError, LookupError):
    """A requested element, index, or row does not exist."""

    code = "NOT_FOUND"


class AlreadyExistsError(GraphError):
    """ID collision on create, or duplicate index/key-index registration."""

    code = "ALREADY_EXISTS"


class InvalidArgumentError(GraphError, ValueError):
    """Rejected input, raised before any write is issued."""

    code = "INVALID_ARGUMENT"


class LabelRequiredError(InvalidArgumentError):
    code = "LABEL_REQUIRED"


class IndexKindMismatchError(InvalidArgumentError):
    """A named index is registered for the other element kind."""

    code = "INDEX_KIND_MISMATCH"


class IndexingDisabledError(GraphError):
    """Named indexes are switched off in the configuration."""

    code = "INDEXING_DISABLED"


class EncodingError(GraphError):
    code = "ENCODING_ERROR"


class DecodingError(GraphError):
    """Stored bytes could not be decoded; treated as store corruption."""

    code = "DECODING_ERROR"


class MutationsRejectedError(GraphError):
    """The backing store refused a batch of mutations. Never retried."""

    code = "MUTATIONS_REJECTED"


class StoreUnavailableError(GraphError):
    """Administrative or connection failure against the backing store."""

    code = "STORE_UNAVAILABLE"
