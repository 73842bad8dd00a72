"""Cell encoding for graph elements, adjacency, and indexes.

Values are stored as one tag byte followed by a payload, so a reader
never needs out-of-band type information:

====  ==========  =====================================
tag   type        payload
====  ==========  =====================================
n     None        empty
b     bool        ``\\x01`` or ``\\x00``
i     int         ASCII decimal (arbitrary precision)
d     float       IEEE-754 big-endian double
s     str         UTF-8
x     bytes       raw
l     list/tuple  compact JSON array
m     dict        compact JSON object, sorted keys
====  ==========  =====================================

Serialization is deterministic: serialized values are used verbatim as
key-index row keys and compared byte-wise on the scan fallback path.

Row layout (vertex and edge tables, row key = UTF-8 element ID)::

    LABEL     / EXISTS          -> EMPTY                  existence marker
    LABEL     / ""              -> serialize(label)       edges only
    LABEL     / ENDPOINTS       -> serialize([out, in])   edges only
    <key>     / ""              -> serialize(value)       property
    OUT_EDGE  / other<D>edge    -> serialize([edge, lbl]) vertex adjacency
    IN_EDGE   / other<D>edge    -> serialize([edge, lbl]) vertex adjacency
"""

from __future__ import annotations

import json
import struct
from typing import Any

from kvgraph.domain.errors import DecodingError, EncodingError
from kvgraph.domain.types import Direction

LABEL = b"LABEL"
EXISTS = b"EXISTS"
ENDPOINTS = b"ENDPOINTS"
OUT_EDGE = b"OUT_EDGE"
IN_EDGE = b"IN_EDGE"
EMPTY = b""

RESERVED_FAMILIES: frozenset[str] = frozenset(
    f.decode("ascii") for f in (LABEL, OUT_EDGE, IN_EDGE)
)
ADJACENCY_FAMILIES: frozenset[bytes] = frozenset({OUT_EDGE, IN_EDGE})

# Record separator; never produced by generated IDs and rejected in caller IDs.
ID_DELIM = "\x1e"
_ID_DELIM_BYTES = ID_DELIM.encode("utf-8")

_TAG_NONE = b"n"
_TAG_BOOL = b"b"
_TAG_INT = b"i"
_TAG_FLOAT = b"d"
_TAG_STR = b"s"
_TAG_BYTES = b"x"
_TAG_LIST = b"l"
_TAG_DICT = b"m"

_DOUBLE = struct.Struct(">d")


# ---------------------------------------------------------------------------
# Typed values
# ---------------------------------------------------------------------------


def _dump_json(value: Any) -> bytes:
    try:
        return json.dumps(
            value, separators=(",", ":"), sort_keys=True, ensure_ascii=False
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        msg = f"Cannot encode {type(value).__name__} value: {exc}"
        raise EncodingError(msg) from exc


def serialize(value: Any) -> bytes:
    """Encode *value* as a tagged byte string.

    Raises:
        EncodingError: If the value's type is not supported.
    """
    if value is None:
        return _TAG_NONE
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return _TAG_BOOL + (b"\x01" if value else b"\x00")
    if isinstance(value, int):
        return _TAG_INT + str(value).encode("ascii")
    if isinstance(value, float):
        return _TAG_FLOAT + _DOUBLE.pack(value)
    if isinstance(value, str):
        return _TAG_STR + value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return _TAG_BYTES + bytes(value)
    if isinstance(value, (list, tuple)):
        return _TAG_LIST + _dump_json(list(value))
    if isinstance(value, dict):
        if not all(isinstance(k, str) for k in value):
            raise EncodingError("Map property values must have string keys")
        return _TAG_DICT + _dump_json(value)
    msg = f"Unsupported property value type: {type(value).__name__}"
    raise EncodingError(msg)


def deserialize(data: bytes) -> Any:
    """Decode a byte string produced by :func:`serialize`.

    Raises:
        DecodingError: On an empty buffer, unknown tag, or corrupt payload.
    """
    if not data:
        raise DecodingError("Cannot decode an empty value")

    tag, payload = data[:1], data[1:]
    try:
        if tag == _TAG_NONE:
            if payload:
                raise ValueError("trailing bytes after null tag")
            return None
        if tag == _TAG_BOOL:
            if payload not in (b"\x00", b"\x01"):
                raise ValueError(f"bad boolean payload {payload!r}")
            return payload == b"\x01"
        if tag == _TAG_INT:
            return int(payload.decode("ascii"))
        if tag == _TAG_FLOAT:
            return _DOUBLE.unpack(payload)[0]
        if tag == _TAG_STR:
            return payload.decode("utf-8")
        if tag == _TAG_BYTES:
            return payload
        if tag == _TAG_LIST:
            result = json.loads(payload.decode("utf-8"))
            if not isinstance(result, list):
                raise ValueError("list tag with non-array payload")
            return result
        if tag == _TAG_DICT:
            result = json.loads(payload.decode("utf-8"))
            if not isinstance(result, dict):
                raise ValueError("map tag with non-object payload")
            return result
    except (ValueError, struct.error) as exc:
        msg = f"Corrupt value for tag {tag!r}: {exc}"
        raise DecodingError(msg) from exc

    msg = f"Unknown value tag {tag!r}"
    raise DecodingError(msg)


# ---------------------------------------------------------------------------
# IDs, keys, and adjacency qualifiers
# ---------------------------------------------------------------------------


def encode_id(element_id: str) -> bytes:
    return element_id.encode("utf-8")


def decode_id(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodingError(f"Row key is not valid UTF-8: {raw!r}") from exc


def encode_key(key: str) -> bytes:
    """Encode a property key as a column family."""
    return key.encode("utf-8")


def check_id_encodable(element_id: str) -> None:
    """Raise :class:`EncodingError` if *element_id* contains the delimiter."""
    if ID_DELIM in element_id:
        msg = f"Element ID {element_id!r} contains the reserved adjacency delimiter"
        raise EncodingError(msg, element_id=element_id)


def compose_adjacency(other_id: str, edge_id: str) -> bytes:
    """Build the adjacency qualifier ``other_id<DELIM>edge_id``."""
    check_id_encodable(other_id)
    check_id_encodable(edge_id)
    return encode_id(other_id) + _ID_DELIM_BYTES + encode_id(edge_id)


def decompose_adjacency(qualifier: bytes) -> tuple[str, str]:
    """Split an adjacency qualifier into ``(other_id, edge_id)``."""
    parts = qualifier.split(_ID_DELIM_BYTES)
    if len(parts) != 2:
        msg = f"Malformed adjacency qualifier: {qualifier!r}"
        raise DecodingError(msg)
    return decode_id(parts[0]), decode_id(parts[1])


def encode_adjacency_value(edge_id: str, label: str) -> bytes:
    return serialize([edge_id, label])


def decode_adjacency_value(raw: bytes) -> tuple[str, str]:
    """Return ``(edge_id, label)`` from an adjacency cell value."""
    value = deserialize(raw)
    if not isinstance(value, list) or len(value) != 2:
        msg = f"Malformed adjacency value: {raw!r}"
        raise DecodingError(msg)
    return str(value[0]), str(value[1])


def family_for(direction: Direction) -> bytes:
    """Adjacency family for OUT or IN (BOTH has no single family)."""
    if direction is Direction.OUT:
        return OUT_EDGE
    if direction is Direction.IN:
        return IN_EDGE
    raise ValueError("BOTH has no adjacency family")


def direction_of(family: bytes) -> Direction:
    if family == OUT_EDGE:
        return Direction.OUT
    if family == IN_EDGE:
        return Direction.IN
    msg = f"Not an adjacency family: {family!r}"
    raise DecodingError(msg)


def invert_family(family: bytes) -> bytes:
    """Map ``OUT_EDGE`` to ``IN_EDGE`` and vice versa."""
    return IN_EDGE if family == OUT_EDGE else OUT_EDGE
