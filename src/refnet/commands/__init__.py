"""Subcommand modules for refnet.

Provides register_commands() which uses deferred imports to keep
``refnet --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from refnet.commands.graph import graph
    from refnet.commands.simulate import simulate

    cli.add_command(graph)
    cli.add_command(simulate)

    # --- Standalone commands ---
    from refnet.commands.optimize import optimize

    cli.add_command(optimize)
