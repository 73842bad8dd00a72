"""Command group: vertex add, get, remove, and property edits."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kvgraph.commands._base import KvGroup
from kvgraph.commands._values import parse_properties, parse_value
from kvgraph.domain.types import ElementKind

if TYPE_CHECKING:
    from kvgraph.commands._context import AppContext

_VERTEX_EXAMPLES = """\
kvgraph vertex add alice -p name=Alice -p age=30
kvgraph vertex get alice
kvgraph vertex set alice tags '["admin","ops"]'
kvgraph vertex unset alice tags
kvgraph vertex rm alice"""


@click.group(cls=KvGroup, examples=_VERTEX_EXAMPLES)
def vertex() -> None:
    """Create, inspect, and remove vertices."""


@vertex.command(examples="kvgraph vertex add\nkvgraph vertex add alice -p name=Alice")
@click.argument("vertex_id", required=False)
@click.option("-p", "--property", "props", multiple=True, help="KEY=VALUE (JSON or text).")
@click.pass_obj
def add(app: AppContext, vertex_id: str | None, props: tuple[str, ...]) -> None:
    """Add a vertex (random ID when none is given)."""
    app.emit(app.admin.add_vertex(vertex_id, parse_properties(props)))


@vertex.command(examples="kvgraph vertex get alice\nkvgraph --json vertex get alice")
@click.argument("vertex_id")
@click.pass_obj
def get(app: AppContext, vertex_id: str) -> None:
    """Show a vertex with its properties and incident edges."""
    app.emit(app.admin.get_vertex(vertex_id))


@vertex.command("rm", examples="kvgraph vertex rm alice")
@click.argument("vertex_id")
@click.pass_obj
def remove(app: AppContext, vertex_id: str) -> None:
    """Remove a vertex and every edge touching it."""
    app.emit(app.admin.remove_vertex(vertex_id))


@vertex.command("set", examples="kvgraph vertex set alice age 31")
@click.argument("vertex_id")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def set_(app: AppContext, vertex_id: str, key: str, value: str) -> None:
    """Set one property."""
    app.emit(app.admin.set_property(ElementKind.VERTEX, vertex_id, key, parse_value(value)))


@vertex.command(examples="kvgraph vertex unset alice age")
@click.argument("vertex_id")
@click.argument("key")
@click.pass_obj
def unset(app: AppContext, vertex_id: str, key: str) -> None:
    """Remove one property."""
    app.emit(app.admin.remove_property(ElementKind.VERTEX, vertex_id, key))
