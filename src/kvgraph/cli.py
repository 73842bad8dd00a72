"""Root CLI group for kvgraph with global flags and command registration."""

from __future__ import annotations

import click

from kvgraph import __version__
from kvgraph.commands import register_commands
from kvgraph.commands._base import KvGroup
from kvgraph.commands._context import AppContext
from kvgraph.config.settings import GraphSettings
from kvgraph.domain.errors import GraphError


@click.group(cls=KvGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="kvgraph")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and error detail.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """kvgraph: a property graph on a sorted key-value store."""
    try:
        settings = GraphSettings.load(
            config_path=config_path,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
        )
    except GraphError as exc:
        raise click.ClickException(exc.message) from exc
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
