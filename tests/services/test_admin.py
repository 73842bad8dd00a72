"""Tests for AdminService: ServiceResult wrappers used by the CLI."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest

from kvgraph.services.admin import AdminService
from kvgraph.services.graph import Graph


@pytest.fixture
def admin(graph: Graph) -> AdminService:
    return AdminService(graph)


class TestElements:
    def test_add_vertex_with_properties(self, admin: AdminService) -> None:
        result = admin.add_vertex("v1", {"name": "ada", "age": 36})
        assert result.ok
        assert result.op == "add_vertex"
        assert result.data["properties"] == {"age": 36, "name": "ada"}

    def test_add_vertex_duplicate(self, admin: AdminService) -> None:
        admin.add_vertex("v1")
        result = admin.add_vertex("v1")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "ALREADY_EXISTS"

    def test_get_vertex_lists_edges(self, admin: AdminService) -> None:
        admin.add_vertex("a")
        admin.add_vertex("b")
        admin.add_edge("a", "b", "knows", "e1")
        admin.add_edge("b", "a", "likes", "e2")
        data = admin.get_vertex("a").data
        assert data["edges"] == [
            {"id": "e1", "label": "knows", "direction": "out", "other_id": "b"},
            {"id": "e2", "label": "likes", "direction": "in", "other_id": "b"},
        ]

    def test_get_missing_vertex(self, admin: AdminService) -> None:
        result = admin.get_vertex("nope")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_edge_round_trip(self, admin: AdminService) -> None:
        added = admin.add_edge("a", "b", "knows", "e1", {"since": 2019})
        assert added.ok
        data = admin.get_edge("e1").data
        assert data["label"] == "knows"
        assert (data["out_id"], data["in_id"]) == ("a", "b")
        assert data["properties"] == {"since": 2019}

    def test_edge_without_label(self, admin: AdminService) -> None:
        result = admin.add_edge("a", "b", None)  # type: ignore[arg-type]
        assert result.error is not None
        assert result.error.code == "LABEL_REQUIRED"

    def test_remove(self, admin: AdminService) -> None:
        admin.add_vertex("a")
        admin.add_edge("a", "a", "self", "e1")
        assert admin.remove_edge("e1").ok
        assert admin.remove_vertex("a").ok
        assert not admin.remove_vertex("a").ok

    def test_set_and_remove_property(self, admin: AdminService) -> None:
        admin.add_vertex("a")
        assert admin.set_property("vertex", "a", "tags", ["x"]).ok
        result = admin.remove_property("vertex", "a", "tags")
        assert result.data["old_value"] == ["x"]

    def test_set_property_reserved_key(self, admin: AdminService) -> None:
        admin.add_vertex("a")
        result = admin.set_property("vertex", "a", "id", "b")
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"

    def test_bytes_property_is_jsonable(self, admin: AdminService) -> None:
        result = admin.add_vertex("a", {"raw": b"\x01"})
        assert result.data["properties"] == {"raw": "AQ=="}


class TestFind:
    def test_vertices(self, admin: AdminService) -> None:
        admin.add_vertex("a", {"team": "red"})
        admin.add_vertex("b", {"team": "blue"})
        result = admin.find("vertex", "team", "red")
        assert result.data["count"] == 1
        assert result.data["items"][0]["id"] == "a"

    def test_edges_by_label(self, admin: AdminService) -> None:
        admin.add_edge("a", "b", "knows", "e1")
        result = admin.find("edge", "label", "knows")
        assert [item["id"] for item in result.data["items"]] == ["e1"]

    def test_bad_kind(self, admin: AdminService) -> None:
        result = admin.find("node", "k", "v")
        assert not result.ok


class TestIndexes:
    def test_key_index_lifecycle(self, admin: AdminService) -> None:
        admin.add_vertex("a", {"team": "red"})
        created = admin.create_key_index("team", "vertex")
        assert created.data == {"key": "team", "kind": "Vertex", "entries": 1}
        assert admin.list_key_indexes().data == {"Vertex": ["team"], "Edge": []}
        assert admin.drop_key_index("team", "vertex").ok
        assert admin.list_key_indexes().data["Vertex"] == []

    def test_named_index_lifecycle(self, admin: AdminService) -> None:
        assert admin.create_index("people", "vertex").data == {"name": "people", "kind": "Vertex"}
        assert admin.list_indexes().data["count"] == 1
        assert admin.drop_index("people").ok
        assert admin.drop_index("people").error.code == "NOT_FOUND"  # type: ignore[union-attr]


class TestGraphOps:
    def test_info(self, admin: AdminService) -> None:
        admin.add_vertex("a")
        admin.add_edge("a", "b", "x")
        data = admin.info().data
        assert data["name"] == "kvgraph"
        assert data["vertex_count"] == 1
        assert data["edge_count"] == 1
        assert data["indexes"] == []

    def test_info_without_named_indexes(self, graph_factory: Callable[..., Graph]) -> None:
        admin = AdminService(graph_factory(named_indexes_enabled=False))
        assert "indexes" not in admin.info().data

    def test_init(self, admin: AdminService) -> None:
        data = admin.init().data
        assert "kvgraph_vertex" in data["tables"]

    def test_export_json(self, admin: AdminService) -> None:
        admin.add_edge("a", "b", "x", "e1")
        result = admin.export("json")
        assert result.data["edge_count"] == 1
        assert json.loads(result.data["content"])["links"][0]["id"] == "e1"

    def test_export_unknown_format(self, admin: AdminService) -> None:
        result = admin.export("gexf")
        assert result.error is not None
        assert result.error.detail["valid"] == ["json", "dot"]
