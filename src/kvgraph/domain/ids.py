"""Element ID generation and property-key validation.

INVARIANT: IDs are permanent. Once an element is created under an ID,
the ID never changes; removal frees it for reuse.
"""

from __future__ import annotations

import uuid
from typing import Any

from kvgraph.domain.encoding import RESERVED_FAMILIES, check_id_encodable
from kvgraph.domain.errors import InvalidArgumentError

ID_KEY = "id"
LABEL_KEY = "label"

_FORBIDDEN_KEYS = frozenset({ID_KEY, LABEL_KEY, ""}) | RESERVED_FAMILIES


def generate_id() -> str:
    """Generate a new random element ID (32 hex chars)."""
    return uuid.uuid4().hex


def coerce_id(element_id: Any) -> str:
    """String form of a caller-supplied ID; None is rejected."""
    if element_id is None:
        raise InvalidArgumentError("Element ID can not be null")
    return str(element_id)


def normalize_id(element_id: Any) -> str:
    """Coerce an ID that is about to be written.

    Raises:
        InvalidArgumentError: If *element_id* is None.
        EncodingError: If the ID contains the adjacency delimiter.
    """
    text = coerce_id(element_id)
    check_id_encodable(text)
    return text


def validate_key(key: Any) -> str:
    """Check that *key* may be used as a property key."""
    if not isinstance(key, str):
        msg = f"Property key must be a string, got {type(key).__name__}"
        raise InvalidArgumentError(msg)
    if key in _FORBIDDEN_KEYS:
        msg = f"Property key {key!r} is reserved"
        raise InvalidArgumentError(msg, key=key)
    return key


def validate_property(key: Any, value: Any) -> None:
    """Check a property write before anything is sent to the store."""
    validate_key(key)
    if value is None:
        msg = f"Property value for {key!r} can not be null"
        raise InvalidArgumentError(msg, key=key)
