"""structlog configuration for kvgraph.

Library modules log through stdlib ``logging``; the CLI routes those
records through structlog's ``ProcessorFormatter`` so they share one
renderer with structlog loggers:

- Human (default): console-rendered colored output to stderr
- JSON (--log-json): structured JSON lines to stderr

Every record carries a ``graph`` field naming the graph (table prefix)
the process is working on.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Loggers that only matter when debugging kvgraph itself.
_QUIET_LOGGERS = ("sqlalchemy", "networkx")


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    graph: str | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: DEBUG for ``kvgraph.*``; otherwise WARNING and above.
        log_json: Use JSON renderer instead of console renderer.
        graph: Graph name bound into every record.
    """
    structlog.contextvars.clear_contextvars()
    if graph is not None:
        structlog.contextvars.bind_contextvars(graph=graph)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("kvgraph").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
