"""Command groups: key-index and named index management."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kvgraph.commands._base import KvGroup
from kvgraph.commands._values import KIND_CHOICE

if TYPE_CHECKING:
    from kvgraph.commands._context import AppContext

_KIND_OPTION = click.option(
    "--kind", type=KIND_CHOICE, default="vertex", show_default=True, help="Element kind."
)


@click.group(
    "key-index",
    cls=KvGroup,
    examples="""\
kvgraph key-index create name
kvgraph key-index create weight --kind edge
kvgraph key-index list
kvgraph key-index drop name""",
)
def key_index() -> None:
    """Manage automatic key indexes."""


@key_index.command("create")
@click.argument("key")
@_KIND_OPTION
@click.pass_obj
def create_key_index(app: AppContext, key: str, kind: str) -> None:
    """Index KEY and every value already stored under it."""
    app.emit(app.admin.create_key_index(key, kind))


@key_index.command("drop")
@click.argument("key")
@_KIND_OPTION
@click.pass_obj
def drop_key_index(app: AppContext, key: str, kind: str) -> None:
    """Stop indexing KEY and delete its index entries."""
    app.emit(app.admin.drop_key_index(key, kind))


@key_index.command("list")
@click.pass_obj
def list_key_indexes(app: AppContext) -> None:
    """List indexed keys per element kind."""
    app.emit(app.admin.list_key_indexes())


@click.group(
    cls=KvGroup,
    examples="""\
kvgraph index create people
kvgraph index create heavy --kind edge
kvgraph index list
kvgraph index drop people""",
)
def index() -> None:
    """Manage named indexes."""


@index.command("create")
@click.argument("name")
@_KIND_OPTION
@click.pass_obj
def create_index(app: AppContext, name: str, kind: str) -> None:
    """Create the named index NAME."""
    app.emit(app.admin.create_index(name, kind))


@index.command("drop")
@click.argument("name")
@click.pass_obj
def drop_index(app: AppContext, name: str) -> None:
    """Drop NAME and its backing table."""
    app.emit(app.admin.drop_index(name))


@index.command("list")
@click.pass_obj
def list_indexes(app: AppContext) -> None:
    """List named indexes."""
    app.emit(app.admin.list_indexes())
