"""Root CLI group for wikiweave with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from wikiweave import __version__
from wikiweave.commands import register_commands
from wikiweave.commands._context import AppContext
from wikiweave.config.settings import WikiSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="wikiweave")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--root",
    "corpus_root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Corpus directory (default: config file's directory, else CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    corpus_root: Path | None,
) -> None:
    """wikiweave — backlinks, blocks and transclusion for Markdown wikis."""
    ctx.ensure_object(dict)
    settings = WikiSettings.from_cli(
        config_path=config_path,
        corpus_root=corpus_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
