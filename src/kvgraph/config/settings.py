"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs:   CLI flags or explicit overrides
  2. Env vars:      ``KVGRAPH_*`` prefix, ``__`` for nested sections
  3. TOML file:     ``kvgraph.toml`` discovered via walk-up
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` fed by
:mod:`kvgraph.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from kvgraph.config.discovery import read_config, resolve_config
from kvgraph.config.models import (
    GraphConfig,
    QueryConfig,
    StoreConfig,
    TableNames,
    WriterConfig,
)

DEFAULT_DB_FILENAME = "kvgraph.db"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``kvgraph.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = read_config(toml_path) if toml_path else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class GraphSettings(BaseSettings):
    """Unified settings for a graph instance and the CLI around it.

    Attributes:
        root: Directory the default SQLite file lives in (parent of
            ``kvgraph.toml``, or CWD if no config found).
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KVGRAPH_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    store: StoreConfig = Field(default_factory=StoreConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)

    @property
    def store_url(self) -> str:
        """The SQLAlchemy URL of the backing store."""
        if self.store.url:
            return self.store.url
        return f"sqlite:///{self.root / DEFAULT_DB_FILENAME}"

    @property
    def tables(self) -> TableNames:
        return TableNames(prefix=self.graph.name)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **overrides: Any,
    ) -> GraphSettings:
        """Construct settings for a CLI invocation or an embedding program.

        Discovers ``kvgraph.toml`` via walk-up (or explicit *config_path*),
        resolves *root* from the config file's parent directory, and
        merges *overrides* as highest-priority values.
        """
        toml_path = resolve_config(config_path, root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                root=resolved_root,
                config_path=toml_path,
                **overrides,
            )
        finally:
            _tls.toml_path = None
