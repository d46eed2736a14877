"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Holds the settings, builds the Vault on first use
and routes results to stdout or stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikiweave.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from wikiweave.config.settings import WikiSettings
    from wikiweave.infrastructure.vault import Vault
    from wikiweave.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is created lazily so ``--help``, ``--version`` and
    ``--examples`` never touch the corpus.
    """

    def __init__(self, settings: WikiSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from wikiweave.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from wikiweave.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from wikiweave.infrastructure.vault import Vault

            self._vault = Vault(self.settings)
        return self._vault

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult.

        * Success: writes to stdout. Warnings go to stderr so they stay
          out of piped output.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries its warnings.
            if not settings.json_output and not settings.quiet:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
