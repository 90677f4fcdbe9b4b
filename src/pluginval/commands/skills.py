"""Command: show the skill registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pluginval.commands._base import PluginvalCommand, repo_root_argument

if TYPE_CHECKING:
    from pluginval.commands._context import AppContext


@click.command(
    cls=PluginvalCommand,
    examples="""\
  pluginval skills
  pluginval --json skills path/to/repo""",
)
@repo_root_argument
@click.pass_obj
def skills(app: AppContext, repo_root: str | None) -> None:
    """List skills per plugin and the agents that declare them."""
    app.use_repo_root(repo_root)
    app.emit(app.service.skills(repo_root))
