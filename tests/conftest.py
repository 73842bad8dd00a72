"""Shared pytest fixtures and test helpers for kvgraph tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from kvgraph.config.models import GraphConfig
from kvgraph.config.settings import GraphSettings
from kvgraph.infrastructure.store import SqlAlchemyStore, create_store_engine
from kvgraph.infrastructure.writer import MutationWriter
from kvgraph.services.graph import Graph, open_graph


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's KVGRAPH_* environment out of the tests."""
    monkeypatch.delenv("KVGRAPH_CONFIG", raising=False)
    monkeypatch.delenv("KVGRAPH_STORE__URL", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqlAlchemyStore]:
    """File-backed SQLite store in a temp directory."""
    s = SqlAlchemyStore(create_store_engine(f"sqlite:///{tmp_path / 'store.db'}"))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def writer(store: SqlAlchemyStore) -> MutationWriter:
    return MutationWriter(store, max_buffered=100)


def _open(root: Path, **graph_options: Any) -> Graph:
    settings = GraphSettings.load(root=root, graph=GraphConfig(**graph_options))
    return open_graph(settings)


@pytest.fixture
def graph(tmp_path: Path) -> Iterator[Graph]:
    """A fresh graph with default settings."""
    g = _open(tmp_path)
    try:
        yield g
    finally:
        g.close()


@pytest.fixture
def graph_factory(tmp_path: Path) -> Iterator[Callable[..., Graph]]:
    """Open graphs under *tmp_path* with ``[graph]`` overrides; all closed on teardown.

    Graphs opened with the same ``name`` share the same tables.
    """
    opened: list[Graph] = []

    def factory(**graph_options: Any) -> Graph:
        g = _open(tmp_path, **graph_options)
        opened.append(g)
        return g

    yield factory
    for g in opened:
        g.close()


@pytest.fixture
def _isolated_graph(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI with CWD in a temp directory so it opens an isolated graph.

    Use via ``@pytest.mark.usefixtures("_isolated_graph")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)
