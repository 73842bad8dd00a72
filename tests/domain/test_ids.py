"""Tests for ID generation and property-key validation."""

from __future__ import annotations

import pytest

from kvgraph.domain.encoding import ID_DELIM
from kvgraph.domain.errors import EncodingError, InvalidArgumentError
from kvgraph.domain.ids import (
    coerce_id,
    generate_id,
    normalize_id,
    validate_key,
    validate_property,
)


class TestGenerateId:
    def test_hex_uuid(self) -> None:
        element_id = generate_id()
        assert len(element_id) == 32
        int(element_id, 16)

    def test_unique(self) -> None:
        assert len({generate_id() for _ in range(100)}) == 100


class TestNormalizeId:
    def test_string_passthrough(self) -> None:
        assert normalize_id("v1") == "v1"

    def test_non_string_coerced(self) -> None:
        assert normalize_id(42) == "42"

    def test_none_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            normalize_id(None)

    def test_delimiter_rejected(self) -> None:
        with pytest.raises(EncodingError):
            normalize_id(f"a{ID_DELIM}b")

    def test_coerce_allows_delimiter(self) -> None:
        assert coerce_id(f"a{ID_DELIM}b") == f"a{ID_DELIM}b"


class TestValidateKey:
    @pytest.mark.parametrize("key", ["", "id", "label", "LABEL", "OUT_EDGE", "IN_EDGE"])
    def test_reserved(self, key: str) -> None:
        with pytest.raises(InvalidArgumentError):
            validate_key(key)

    def test_non_string(self) -> None:
        with pytest.raises(InvalidArgumentError):
            validate_key(5)

    def test_ordinary_key(self) -> None:
        assert validate_key("age") == "age"


class TestValidateProperty:
    def test_none_value(self) -> None:
        with pytest.raises(InvalidArgumentError, match="can not be null"):
            validate_property("age", None)

    def test_valid(self) -> None:
        validate_property("age", 0)
