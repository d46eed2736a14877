"""Commands: per-page content, backlink, block and embed queries.

PATH arguments are corpus-relative, e.g. ``notes/Foo.md``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikiweave.commands._base import WikiCommand
from wikiweave.services.content import ContentService

if TYPE_CHECKING:
    from wikiweave.commands._context import AppContext


@click.command(
    cls=WikiCommand,
    examples="""\
  wikiweave show notes/Foo.md
  wikiweave -v show notes/Foo.md
  wikiweave --json show journal/2024-01-15.md""",
)
@click.argument("path")
@click.pass_obj
def show(app: AppContext, path: str) -> None:
    """Show a page with embeds expanded, plus its links, blocks and backlinks."""
    app.emit(ContentService(app.vault).get_content(path))


@click.command(
    cls=WikiCommand,
    examples="""\
  wikiweave backlinks notes/Foo.md
  wikiweave -q backlinks notes/Foo.md
  wikiweave --json backlinks notes/Foo.md""",
)
@click.argument("path")
@click.pass_obj
def backlinks(app: AppContext, path: str) -> None:
    """List the pages that link to PATH, with context."""
    app.emit(ContentService(app.vault).backlinks(path))


@click.command(
    cls=WikiCommand,
    examples="""\
  wikiweave blocks notes/Foo.md
  wikiweave -q blocks notes/Foo.md""",
)
@click.argument("path")
@click.pass_obj
def blocks(app: AppContext, path: str) -> None:
    """List the addressable paragraph and heading blocks of PATH."""
    app.emit(ContentService(app.vault).blocks(path))


@click.command(
    cls=WikiCommand,
    examples="""\
  wikiweave embed notes/Foo.md
  wikiweave --json embed notes/Foo.md""",
)
@click.argument("path")
@click.pass_obj
def embed(app: AppContext, path: str) -> None:
    """Print PATH with every ![[embed]] expanded."""
    app.emit(ContentService(app.vault).render(path))


@click.command(
    cls=WikiCommand,
    examples="""\
  wikiweave refs notes/Foo.md blk1
  wikiweave refs notes/Foo.md intro""",
)
@click.argument("path")
@click.argument("block_id")
@click.pass_obj
def refs(app: AppContext, path: str, block_id: str) -> None:
    """List the pages that link to or embed block BLOCK_ID of PATH."""
    app.emit(ContentService(app.vault).block_references(path, block_id))
