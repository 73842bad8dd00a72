"""Click base classes for kvgraph commands.

``KvCommand`` and ``KvGroup`` accept an ``examples`` parameter. Passing
``--examples`` prints them and exits, keeping ``--help`` short. Groups
list their subcommands in the order they were registered, so element
commands read in lifecycle order (add, get, rm, set, unset).
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def format_examples(examples: str) -> str:
    """Normalize an examples block to a two-space indent."""
    return textwrap.indent(textwrap.dedent(examples).strip("\n"), "  ")


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    text = format_examples(examples)

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(text)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class KvCommand(click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class KvGroup(click.Group):
    """Group whose subcommands are :class:`KvCommand` by default."""

    command_class = KvCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
