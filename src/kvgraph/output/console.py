"""Rich Console factory and theme for kvgraph output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

KVGRAPH_THEME = Theme(
    {
        "kv.ok": "bold green",
        "kv.error": "bold red",
        "kv.warning": "bold yellow",
        "kv.op": "bold cyan",
        "kv.key": "dim",
        "kv.id": "bold blue",
        "kv.label": "magenta",
        "kv.kind.vertex": "green",
        "kv.kind.edge": "yellow",
    }
)

_KIND_STYLES: dict[str, str] = {
    "Vertex": "kv.kind.vertex",
    "Edge": "kv.kind.edge",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=KVGRAPH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    return _KIND_STYLES.get(kind, "")
