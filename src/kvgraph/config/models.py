"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, kvgraph.toml only contains overrides.
A fresh graph needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- kvgraph.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    url: str | None = None  # None -> sqlite file under the config root
    echo: bool = False


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    name: str = "kvgraph"
    skip_existence_checks: bool = False
    auto_index: bool = False
    preload_properties: list[str] = Field(default_factory=list)
    named_indexes_enabled: bool = True
    verify_edge_endpoints: bool = False
    create: bool = True
    clear: bool = False


class WriterConfig(BaseModel):
    """[writer] section."""

    model_config = {"frozen": True}

    max_buffered_mutations: int = Field(default=1000, ge=1)


class QueryConfig(BaseModel):
    """[query] section."""

    model_config = {"frozen": True}

    query_threads: int = Field(default=4, ge=1)


class KvGraphConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)


# --- Derived physical table names ---


class TableNames(BaseModel):
    """Physical table names derived from the graph name prefix."""

    model_config = {"frozen": True}

    prefix: str = "kvgraph"

    @property
    def vertex(self) -> str:
        return f"{self.prefix}_vertex"

    @property
    def edge(self) -> str:
        return f"{self.prefix}_edge"

    @property
    def vertex_key_index(self) -> str:
        return f"{self.prefix}_vertex_key_index"

    @property
    def edge_key_index(self) -> str:
        return f"{self.prefix}_edge_key_index"

    @property
    def index_names(self) -> str:
        return f"{self.prefix}_index_names"

    @property
    def indexed_keys(self) -> str:
        return f"{self.prefix}_indexed_keys"

    def named_index(self, index_name: str) -> str:
        return f"{self.prefix}_index_{index_name}"

    def base_tables(self) -> list[str]:
        """Every fixed table (named index tables are created on demand)."""
        return [
            self.vertex,
            self.edge,
            self.vertex_key_index,
            self.edge_key_index,
            self.index_names,
            self.indexed_keys,
        ]
