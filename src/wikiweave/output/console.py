"""Rich Console factory and theme for wikiweave output.

Consoles render into a StringIO buffer so renderers keep a plain
``-> str`` contract. Outside a terminal (tests, pipes) Rich drops color
codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WIKI_THEME = Theme(
    {
        "wiki.ok": "bold green",
        "wiki.error": "bold red",
        "wiki.warning": "bold yellow",
        "wiki.op": "bold cyan",
        "wiki.key": "dim",
        "wiki.path": "bold blue",
        "wiki.title": "bold",
        "wiki.context": "italic",
        "wiki.kind.paragraph": "green",
        "wiki.kind.heading": "magenta",
        "wiki.kind.wikilink": "blue",
        "wiki.kind.embed": "cyan",
        "wiki.broken": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=WIKI_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Rich style name for a block or link kind (empty if unknown)."""
    style = f"wiki.kind.{kind}"
    return style if style in WIKI_THEME.styles else ""
