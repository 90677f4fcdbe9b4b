"""Subcommand modules for pluginval.

Provides register_commands() which uses deferred imports to keep
``pluginval --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pluginval.commands.arch import arch
    from pluginval.commands.layers import layers
    from pluginval.commands.skills import skills

    cli.add_command(arch)
    cli.add_command(layers)
    cli.add_command(skills)
