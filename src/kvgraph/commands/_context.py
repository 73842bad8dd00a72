"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Opens the graph lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from kvgraph.output.formatters import format_result

if TYPE_CHECKING:
    from kvgraph.config.settings import GraphSettings
    from kvgraph.services.admin import AdminService
    from kvgraph.services.graph import Graph
    from kvgraph.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The graph is opened on first use so ``--help`` and ``--version``
    never touch the store.
    """

    def __init__(self, settings: GraphSettings) -> None:
        self.settings = settings
        self._graph: Graph | None = None

        from kvgraph.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, log_json=settings.log_json, graph=settings.graph.name
        )

    @property
    def graph(self) -> Graph:
        if self._graph is None:
            from kvgraph.services.graph import open_graph

            self._graph = open_graph(self.settings)
        return self._graph

    @property
    def admin(self) -> AdminService:
        from kvgraph.services.admin import AdminService

        return AdminService(self.graph)

    def close(self) -> None:
        if self._graph is not None:
            self._graph.close()
            self._graph = None

    def emit(self, result: ServiceResult) -> None:
        """Output a ServiceResult.

        * Success: stdout; warnings go to stderr outside JSON mode.
        * Failure: stderr, then exit code 1.
        """
        output = format_result(
            result, json_output=self.settings.json_output, verbose=self.settings.verbose
        )
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
