"""Subcommand modules for wikiweave.

register_commands() imports each module on demand so ``wikiweave --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the graph group and the standalone page commands."""
    # --- Groups ---
    from wikiweave.commands.graph import graph

    cli.add_command(graph)

    # --- Standalone commands ---
    from wikiweave.commands.page import backlinks, blocks, embed, refs, show

    cli.add_command(show)
    cli.add_command(backlinks)
    cli.add_command(blocks)
    cli.add_command(embed)
    cli.add_command(refs)
