"""Subcommand modules for momentval.

Provides register_commands() which uses deferred imports to keep
``momentval --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from momentval.commands.check import check

    cli.add_command(check)
