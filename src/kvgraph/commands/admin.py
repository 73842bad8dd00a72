"""Standalone commands: init, info, find, export."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from kvgraph.commands._base import KvCommand
from kvgraph.commands._values import KIND_CHOICE, parse_value
from kvgraph.services.admin import EXPORT_FORMATS

if TYPE_CHECKING:
    from kvgraph.commands._context import AppContext


@click.command("init", cls=KvCommand, examples="kvgraph init\nkvgraph -c ./kvgraph.toml init")
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the graph's tables (clearing them if configured)."""
    app.emit(app.admin.init())


@click.command(cls=KvCommand, examples="kvgraph info\nkvgraph --json info")
@click.pass_obj
def info(app: AppContext) -> None:
    """Show element counts, indexed keys, and named indexes."""
    app.emit(app.admin.info())


@click.command(
    cls=KvCommand,
    examples="""\
kvgraph find name Alice
kvgraph find age 30
kvgraph find --kind edge label knows""",
)
@click.argument("key")
@click.argument("value")
@click.option(
    "--kind", type=KIND_CHOICE, default="vertex", show_default=True, help="Element kind."
)
@click.pass_obj
def find(app: AppContext, key: str, value: str, kind: str) -> None:
    """Find elements whose KEY equals VALUE (JSON or text)."""
    app.emit(app.admin.find(kind, key, parse_value(value)))


@click.command(
    cls=KvCommand,
    examples="""\
kvgraph export
kvgraph export --format dot --output graph.dot""",
)
@click.option(
    "--format", "fmt", type=click.Choice(EXPORT_FORMATS), default="json", show_default=True
)
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
def export(app: AppContext, fmt: str, output: Path | None) -> None:
    """Export a snapshot of the graph as JSON or Graphviz DOT."""
    result = app.admin.export(fmt)
    if output is None or not result.ok:
        app.emit(result)
        return
    data = dict(result.data)
    output.write_text(data.pop("content"), encoding="utf-8")
    data["output_file"] = str(output)
    app.emit(result.model_copy(update={"data": data}))
