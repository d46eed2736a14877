"""Output mode dispatch for ServiceResult.

Three modes: ``--json`` (the full result as JSON, for scripts and HTTP
callers), ``--quiet`` (paths only) and the default Rich rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from wikiweave.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from wikiweave.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Global output flags, taken from the CLI."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult according to *settings*.

    JSON wins over quiet; quiet wins over verbose.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
