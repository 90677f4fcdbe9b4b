"""Command: list classified layer files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pluginval.commands._base import PluginvalCommand, repo_root_argument

if TYPE_CHECKING:
    from pluginval.commands._context import AppContext


@click.command(
    cls=PluginvalCommand,
    examples="""\
  pluginval layers
  pluginval layers --layer skill
  pluginval layers --plugin develop-workflow
  pluginval -q layers --layer agent""",
)
@repo_root_argument
@click.option(
    "--layer",
    type=click.Choice(["command", "agent", "skill"]),
    default=None,
    help="Only show files in this layer.",
)
@click.option("--plugin", default=None, help="Only show files of this plugin.")
@click.pass_obj
def layers(
    app: AppContext,
    repo_root: str | None,
    layer: str | None,
    plugin: str | None,
) -> None:
    """List command, agent and skill files with their layer and plugin."""
    app.use_repo_root(repo_root)
    app.emit(app.service.layers(repo_root, layer=layer, plugin=plugin))
