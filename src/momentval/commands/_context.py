"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Configures logging and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from momentval.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from momentval.config.settings import MomentSettings
    from momentval.services.result import EvaluationResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: MomentSettings) -> None:
        self.settings = settings

        from momentval.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            messages=self.settings.messages,
        )

    def emit(self, result: EvaluationResult, *, op: str) -> None:
        """Format and output an EvaluationResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.  JSON output always
          goes to stdout so it can be piped.
        """
        settings = self.output_settings
        output = format_result(result, op=op, settings=settings)
        if result.ok:
            click.echo(output)
            return
        click.echo(output, err=not settings.json_output)
        raise SystemExit(1)
