"""Command: layered-architecture validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pluginval.commands._base import PluginvalCommand, repo_root_argument

if TYPE_CHECKING:
    from pluginval.commands._context import AppContext


@click.command(
    cls=PluginvalCommand,
    examples="""\
  pluginval arch
  pluginval arch path/to/repo
  pluginval arch --errors-only
  pluginval --json arch
  pluginval -v arch""",
)
@repo_root_argument
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default=None,
    help="Hide issues below this severity (default from config).",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def arch(
    app: AppContext,
    repo_root: str | None,
    min_severity: str | None,
    errors_only: bool,
) -> None:
    """Validate layer dependencies, duplication, responsibilities and skill references."""
    threshold = "error" if errors_only else min_severity
    app.use_repo_root(repo_root)
    app.emit(app.service.validate(repo_root, min_severity=threshold))
