"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides the architecture service and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pluginval.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pluginval.config.settings import PluginvalSettings
    from pluginval.services.architecture import ArchitectureService
    from pluginval.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: PluginvalSettings, *, config_override: bool = False) -> None:
        self.settings = settings
        self._config_override = config_override
        self._service: ArchitectureService | None = None

        from pluginval.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from pluginval.services.telemetry import enable_telemetry

            enable_telemetry()

    def use_repo_root(self, repo_root: str | None) -> None:
        """Re-resolve settings for a repository named on the command line.

        An explicit ``--config`` file always wins, so only discovered
        configuration is looked up again from *repo_root*.
        """
        if repo_root is None or self._config_override:
            return
        self.settings = self.settings.for_repo_root(Path(repo_root))
        self._service = None

    @property
    def service(self) -> ArchitectureService:
        """The architecture service (created lazily on first access)."""
        if self._service is None:
            from pluginval.services.architecture import ArchitectureService

            self._service = ArchitectureService(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            show_passed=self.settings.report.show_passed,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
