"""Tests for the vertex command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from kvgraph.cli import cli


def _json(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["--json", *args])
    return json.loads(result.output)


@pytest.mark.usefixtures("_isolated_graph")
class TestVertexAdd:
    def test_add(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["vertex", "add", "alice"])
        assert result.exit_code == 0
        assert "OK  add_vertex" in result.output
        assert "id: alice" in result.output

    def test_add_generated_id(self, cli_runner: CliRunner) -> None:
        data = _json(cli_runner, "vertex", "add")
        assert data["ok"] is True
        assert len(data["data"]["id"]) == 32

    def test_add_with_properties(self, cli_runner: CliRunner) -> None:
        data = _json(
            cli_runner, "vertex", "add", "alice", "-p", "name=Alice", "-p", "age=30",
            "-p", 'tags=["a","b"]',
        )
        assert data["data"]["properties"] == {"age": 30, "name": "Alice", "tags": ["a", "b"]}

    def test_duplicate_fails(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["vertex", "add", "alice"])
        result = cli_runner.invoke(cli, ["vertex", "add", "alice"])
        assert result.exit_code == 1
        assert "ALREADY_EXISTS" in result.output

    def test_bad_property_pair(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["vertex", "add", "alice", "-p", "novalue"])
        assert result.exit_code == 2

    def test_null_property_rejected(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["vertex", "add", "alice", "-p", "k=null"])
        assert result.exit_code == 2


@pytest.mark.usefixtures("_isolated_graph")
class TestVertexGet:
    def test_get_shows_edges(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["vertex", "add", "alice", "-p", "name=Alice"])
        cli_runner.invoke(cli, ["vertex", "add", "bob"])
        cli_runner.invoke(cli, ["edge", "add", "alice", "bob", "knows", "--id", "e1"])
        result = cli_runner.invoke(cli, ["vertex", "get", "alice"])
        assert result.exit_code == 0
        assert "Vertex alice" in result.output
        assert "-> bob  [knows]  e1" in result.output

    def test_get_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "vertex", "get", "nobody"])
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["code"] == "NOT_FOUND"


@pytest.mark.usefixtures("_isolated_graph")
class TestVertexProperties:
    def test_set_and_unset(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["vertex", "add", "alice"])
        assert cli_runner.invoke(cli, ["vertex", "set", "alice", "age", "31"]).exit_code == 0
        assert _json(cli_runner, "vertex", "get", "alice")["data"]["properties"] == {"age": 31}

        data = _json(cli_runner, "vertex", "unset", "alice", "age")
        assert data["data"]["old_value"] == 31
        assert _json(cli_runner, "vertex", "get", "alice")["data"]["properties"] == {}

    def test_quoted_number_stays_string(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["vertex", "add", "alice"])
        cli_runner.invoke(cli, ["vertex", "set", "alice", "zip", '"02134"'])
        props = _json(cli_runner, "vertex", "get", "alice")["data"]["properties"]
        assert props == {"zip": "02134"}

    def test_reserved_key(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["vertex", "add", "alice"])
        result = cli_runner.invoke(cli, ["vertex", "set", "alice", "label", "x"])
        assert result.exit_code == 1
        assert "INVALID_ARGUMENT" in result.output


@pytest.mark.usefixtures("_isolated_graph")
class TestVertexRemove:
    def test_remove_cascades(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["vertex", "add", "alice"])
        cli_runner.invoke(cli, ["vertex", "add", "bob"])
        cli_runner.invoke(cli, ["edge", "add", "alice", "bob", "knows", "--id", "e1"])
        assert cli_runner.invoke(cli, ["vertex", "rm", "alice"]).exit_code == 0
        assert cli_runner.invoke(cli, ["edge", "get", "e1"]).exit_code == 1
        assert _json(cli_runner, "vertex", "get", "bob")["data"]["edges"] == []

    def test_remove_missing(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["vertex", "rm", "nobody"]).exit_code == 1


class TestVertexExamples:
    def test_group_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["vertex", "--examples"])
        assert result.exit_code == 0
        assert "kvgraph vertex add alice" in result.output
