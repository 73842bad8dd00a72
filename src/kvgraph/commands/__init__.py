"""CLI command groups and standalone commands."""

from __future__ import annotations

import click


def register_commands(cli: click.Group) -> None:
    """Register every command group and standalone command on the root group."""
    from kvgraph.commands.edge import edge
    from kvgraph.commands.index import index, key_index
    from kvgraph.commands.vertex import vertex

    cli.add_command(vertex)
    cli.add_command(edge)
    cli.add_command(key_index)
    cli.add_command(index)

    from kvgraph.commands.admin import export, find, info, init_cmd

    cli.add_command(init_cmd)
    cli.add_command(info)
    cli.add_command(find)
    cli.add_command(export)
