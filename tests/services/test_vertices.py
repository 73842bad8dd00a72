"""Tests for vertex creation, lookup, and removal on the Graph façade."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from kvgraph.domain.errors import (
    AlreadyExistsError,
    EncodingError,
    InvalidArgumentError,
    NotFoundError,
)
from kvgraph.domain.types import Direction
from kvgraph.services.graph import Graph


class TestAddVertex:
    def test_with_explicit_id(self, graph: Graph) -> None:
        vertex = graph.add_vertex("v1")
        assert vertex.id == "v1"
        assert graph.get_vertex("v1") == vertex

    def test_generated_id(self, graph: Graph) -> None:
        vertex = graph.add_vertex()
        assert len(vertex.id) == 32
        assert graph.get_vertex(vertex.id) is not None

    def test_non_string_id_is_coerced(self, graph: Graph) -> None:
        graph.add_vertex(42)
        assert graph.get_vertex("42") is not None
        assert graph.get_vertex(42) is not None

    def test_existence_without_properties(self, graph: Graph) -> None:
        graph.add_vertex("v1")
        graph.context.cache.clear()
        vertex = graph.get_vertex("v1")
        assert vertex is not None
        assert vertex.property_keys() == set()

    def test_duplicate_rejected(self, graph: Graph) -> None:
        graph.add_vertex("v1")
        with pytest.raises(AlreadyExistsError):
            graph.add_vertex("v1")

    def test_delimiter_in_id_rejected(self, graph: Graph) -> None:
        with pytest.raises(EncodingError):
            graph.add_vertex("bad\x1eid")
        assert graph.is_empty()

    def test_id_reusable_after_removal(self, graph: Graph) -> None:
        graph.add_vertex("v1").set_property("name", "old")
        graph.remove_vertex("v1")
        vertex = graph.add_vertex("v1")
        assert vertex.get_property("name") is None


class TestGetVertex:
    def test_missing(self, graph: Graph) -> None:
        assert graph.get_vertex("nope") is None

    def test_null_id(self, graph: Graph) -> None:
        with pytest.raises(InvalidArgumentError):
            graph.get_vertex(None)

    def test_cached_handle_is_reused(self, graph: Graph) -> None:
        vertex = graph.add_vertex("v1")
        assert graph.get_vertex("v1") is vertex

    def test_load_after_cache_clear(self, graph: Graph) -> None:
        graph.add_vertex("v1")
        graph.context.cache.clear()
        first = graph.get_vertex("v1")
        assert graph.get_vertex("v1") is first

    def test_edge_id_is_not_a_vertex(self, graph: Graph) -> None:
        graph.add_vertex("a").add_edge("x", graph.add_vertex("b"), "e1")
        assert graph.get_vertex("e1") is None

    def test_preloaded_properties(self, graph_factory: Callable[..., Graph]) -> None:
        g = graph_factory(preload_properties=["name"])
        g.add_vertex("v1").set_property("name", "ada")
        g.context.cache.clear()
        vertex = g.get_vertex("v1")
        assert vertex is not None
        assert vertex._properties == {"name": "ada"}


class TestGetVertices:
    def test_all(self, graph: Graph) -> None:
        for vid in ("b", "a", "c"):
            graph.add_vertex(vid)
        assert [v.id for v in graph.get_vertices()] == ["a", "b", "c"]

    def test_empty_graph(self, graph: Graph) -> None:
        assert graph.get_vertices() == []

    def test_by_property_full_scan(self, graph: Graph) -> None:
        graph.add_vertex("a").set_property("age", 30)
        graph.add_vertex("b").set_property("age", 40)
        graph.add_vertex("c").set_property("age", "30")
        assert [v.id for v in graph.get_vertices("age", 30)] == ["a"]

    def test_null_value(self, graph: Graph) -> None:
        with pytest.raises(InvalidArgumentError):
            graph.get_vertices("age", None)

    def test_property_values_carried(self, graph: Graph) -> None:
        graph.add_vertex("a").set_property("name", "ada")
        graph.context.cache.clear()
        (vertex,) = graph.get_vertices()
        assert vertex.get_property("name") == "ada"


class TestRemoveVertex:
    def test_cascades_to_incident_edges(self, graph: Graph) -> None:
        a, b, c = (graph.add_vertex(v) for v in "abc")
        graph.add_edge(a, b, "L", "e1")
        graph.add_edge(b, c, "L", "e2")

        graph.remove_vertex(b)

        assert graph.get_vertex("b") is None
        assert graph.get_edge("e1") is None
        assert graph.get_edge("e2") is None
        assert graph.get_vertex("a") is not None
        assert graph.get_vertex("c") is not None
        assert graph.context.vertices.read_adjacency("a") == []
        assert graph.context.vertices.read_adjacency("c") == []

    def test_keeps_unrelated_adjacency(self, graph: Graph) -> None:
        a, b, c = (graph.add_vertex(v) for v in "abc")
        graph.add_edge(a, b, "L", "e1")
        graph.add_edge(a, c, "L", "e2")
        graph.remove_vertex("b")
        assert [e.id for e in a.get_edges(Direction.OUT)] == ["e2"]

    def test_self_loop(self, graph: Graph) -> None:
        a = graph.add_vertex("a")
        graph.add_edge(a, a, "self", "loop")
        graph.remove_vertex(a)
        assert graph.get_edge("loop") is None
        assert graph.is_empty()

    def test_missing_vertex(self, graph: Graph) -> None:
        with pytest.raises(NotFoundError):
            graph.remove_vertex("nope")

    def test_through_handle(self, graph: Graph) -> None:
        vertex = graph.add_vertex("v1")
        vertex.remove()
        assert graph.get_vertex("v1") is None

    def test_edge_handle_rejected(self, graph: Graph) -> None:
        edge = graph.add_vertex("a").add_edge("x", graph.add_vertex("b"))
        with pytest.raises(InvalidArgumentError):
            graph.remove_vertex(edge)  # type: ignore[arg-type]

    def test_removes_vertex_key_index_postings(self, graph: Graph) -> None:
        graph.create_key_index("name", "vertex")
        graph.add_vertex("a").set_property("name", "ada")
        graph.remove_vertex("a")
        assert graph.context.vertex_key_index.lookup("name", "ada") == []


class TestSkipExistenceChecks:
    def test_duplicate_add_allowed(self, graph_factory: Callable[..., Graph]) -> None:
        g = graph_factory(skip_existence_checks=True)
        g.add_vertex("v1")
        g.add_vertex("v1")
        assert [v.id for v in g.get_vertices()] == ["v1"]

    def test_get_returns_unchecked_handle(self, graph_factory: Callable[..., Graph]) -> None:
        g = graph_factory(skip_existence_checks=True)
        vertex = g.get_vertex("never-added")
        assert vertex is not None
        assert vertex.id == "never-added"
