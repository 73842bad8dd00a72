"""Tests for config discovery and parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from kvgraph.config.discovery import CONFIG_FILENAME, find_config, read_config, resolve_config
from kvgraph.domain.errors import InvalidArgumentError


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[graph]\nname = "test"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[graph]\nname = "test"\n')
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file.resolve()

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[graph]\nname = "env"\n')
        monkeypatch.setenv("KVGRAPH_CONFIG", str(config_file))
        assert find_config(tmp_path / "elsewhere") == config_file

    def test_env_var_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        graph_dir = tmp_path / "social"
        graph_dir.mkdir()
        (graph_dir / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("KVGRAPH_CONFIG", str(graph_dir))
        assert find_config(tmp_path) == graph_dir / CONFIG_FILENAME

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("KVGRAPH_CONFIG", str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestResolveConfig:
    def test_explicit_file(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("")
        assert resolve_config(str(custom)) == custom

    def test_explicit_directory(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert resolve_config(tmp_path) == tmp_path / CONFIG_FILENAME

    def test_explicit_missing(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidArgumentError, match="Config file not found"):
            resolve_config(tmp_path / "absent.toml")

    def test_falls_back_to_discovery(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert resolve_config(None, tmp_path) == (tmp_path / CONFIG_FILENAME).resolve()


class TestReadConfig:
    def test_sections(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[graph]\nname = "social"\n[query]\nquery_threads = 2\n')
        assert read_config(config_file) == {
            "graph": {"name": "social"},
            "query": {"query_threads": 2},
        }

    def test_invalid_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[graph\n")
        with pytest.raises(InvalidArgumentError) as exc_info:
            read_config(config_file)
        assert exc_info.value.detail == {"path": str(config_file)}
