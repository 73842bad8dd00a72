"""Locate and parse the ``kvgraph.toml`` that describes a graph.

Resolution order: an explicit ``--config`` path, then ``KVGRAPH_CONFIG``
(a file, or a directory holding ``kvgraph.toml``), then a walk up from
the working directory the way git finds ``.git/``. The directory the file
lives in becomes the graph root, where the default SQLite store is kept.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from kvgraph.domain.errors import InvalidArgumentError

CONFIG_FILENAME = "kvgraph.toml"
CONFIG_ENV_VAR = "KVGRAPH_CONFIG"


def _as_config_file(path: Path) -> Path:
    return path / CONFIG_FILENAME if path.is_dir() else path


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file for *start* (default: cwd), or None.

    ``KVGRAPH_CONFIG`` wins over the walk-up; when it names nothing that
    exists, no file is used.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = _as_config_file(Path(env_path))
        return candidate if candidate.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(config_path: str | Path | None, start: Path | None = None) -> Path | None:
    """The file for an explicit *config_path*, or the discovered one.

    Raises:
        InvalidArgumentError: If *config_path* is given but does not exist.
    """
    if config_path is None or config_path == "":
        return find_config(start)
    candidate = _as_config_file(Path(config_path))
    if not candidate.is_file():
        msg = f"Config file not found: {candidate}"
        raise InvalidArgumentError(msg, path=str(candidate))
    return candidate


def read_config(path: Path) -> dict[str, Any]:
    """Parse *path* into the raw section mapping.

    Raises:
        InvalidArgumentError: If the file is not valid TOML.
    """
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise InvalidArgumentError(msg, path=str(path)) from exc
