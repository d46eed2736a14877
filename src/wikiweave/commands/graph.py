"""Command group: corpus-wide link graph queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikiweave.commands._base import WikiGroup
from wikiweave.services.graph import GraphService

if TYPE_CHECKING:
    from wikiweave.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  wikiweave graph neighbors notes/Foo.md
  wikiweave graph orphans
  wikiweave graph hubs --threshold 5
  wikiweave graph broken"""


@click.group(cls=WikiGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Analyze the link graph of the whole corpus."""


@graph.command(
    examples="""\
  wikiweave graph neighbors notes/Foo.md
  wikiweave --json graph neighbors notes/Foo.md"""
)
@click.argument("path")
@click.pass_obj
def neighbors(app: AppContext, path: str) -> None:
    """Show the pages PATH links to and the pages linking to it."""
    app.emit(GraphService(app.vault).neighbors(path))


@graph.command(
    examples="""\
  wikiweave graph orphans
  wikiweave -q graph orphans"""
)
@click.pass_obj
def orphans(app: AppContext) -> None:
    """List pages with no resolved links in or out."""
    app.emit(GraphService(app.vault).orphans())


@graph.command(
    examples="""\
  wikiweave graph hubs
  wikiweave graph hubs --threshold 10"""
)
@click.option("--threshold", default=3, type=int, help="Minimum distinct neighbours.")
@click.pass_obj
def hubs(app: AppContext, threshold: int) -> None:
    """List heavily connected pages."""
    app.emit(GraphService(app.vault).hubs(threshold=threshold))


@graph.command(
    examples="""\
  wikiweave graph broken
  wikiweave --json graph broken"""
)
@click.pass_obj
def broken(app: AppContext) -> None:
    """List links whose target matches no page."""
    app.emit(GraphService(app.vault).broken())
