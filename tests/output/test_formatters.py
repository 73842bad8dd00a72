"""Tests for format_result: JSON vs Rich output."""

from __future__ import annotations

import json

from kvgraph.domain.errors import AlreadyExistsError
from kvgraph.output.formatters import format_result
from kvgraph.services.result import ServiceResult


class TestFormatResult:
    def test_json_success(self) -> None:
        result = ServiceResult(ok=True, op="add_vertex", data={"id": "v1"})
        parsed = json.loads(format_result(result, json_output=True))
        assert parsed["ok"] is True
        assert parsed["data"] == {"id": "v1"}

    def test_json_error(self) -> None:
        result = ServiceResult.failure("add_vertex", AlreadyExistsError("dup", id="v1"))
        parsed = json.loads(format_result(result, json_output=True))
        assert parsed["ok"] is False
        assert parsed["error"]["code"] == "ALREADY_EXISTS"
        assert parsed["error"]["detail"] == {"id": "v1"}

    def test_human_output(self) -> None:
        result = ServiceResult(ok=True, op="drop_index", data={"name": "people"})
        assert format_result(result).splitlines() == ["OK  drop_index", "  name: people"]
