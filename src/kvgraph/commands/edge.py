"""Command group: edge add, get, remove, and property edits."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kvgraph.commands._base import KvGroup
from kvgraph.commands._values import parse_properties, parse_value
from kvgraph.domain.types import ElementKind

if TYPE_CHECKING:
    from kvgraph.commands._context import AppContext

_EDGE_EXAMPLES = """\
kvgraph edge add alice bob knows -p since=2019
kvgraph edge add alice bob knows --id e1
kvgraph edge get e1
kvgraph edge set e1 weight 0.5
kvgraph edge rm e1"""


@click.group(cls=KvGroup, examples=_EDGE_EXAMPLES)
def edge() -> None:
    """Create, inspect, and remove edges."""


@edge.command(examples="kvgraph edge add alice bob knows --id e1 -p since=2019")
@click.argument("out_id")
@click.argument("in_id")
@click.argument("label")
@click.option("--id", "edge_id", default=None, help="Edge ID (random when omitted).")
@click.option("-p", "--property", "props", multiple=True, help="KEY=VALUE (JSON or text).")
@click.pass_obj
def add(
    app: AppContext,
    out_id: str,
    in_id: str,
    label: str,
    edge_id: str | None,
    props: tuple[str, ...],
) -> None:
    """Add an edge OUT_ID -[LABEL]-> IN_ID."""
    app.emit(app.admin.add_edge(out_id, in_id, label, edge_id, parse_properties(props)))


@edge.command(examples="kvgraph edge get e1")
@click.argument("edge_id")
@click.pass_obj
def get(app: AppContext, edge_id: str) -> None:
    """Show an edge with its endpoints and properties."""
    app.emit(app.admin.get_edge(edge_id))


@edge.command("rm", examples="kvgraph edge rm e1")
@click.argument("edge_id")
@click.pass_obj
def remove(app: AppContext, edge_id: str) -> None:
    """Remove an edge."""
    app.emit(app.admin.remove_edge(edge_id))


@edge.command("set", examples="kvgraph edge set e1 weight 0.5")
@click.argument("edge_id")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def set_(app: AppContext, edge_id: str, key: str, value: str) -> None:
    """Set one property."""
    app.emit(app.admin.set_property(ElementKind.EDGE, edge_id, key, parse_value(value)))


@edge.command(examples="kvgraph edge unset e1 weight")
@click.argument("edge_id")
@click.argument("key")
@click.pass_obj
def unset(app: AppContext, edge_id: str, key: str) -> None:
    """Remove one property."""
    app.emit(app.admin.remove_property(ElementKind.EDGE, edge_id, key))
