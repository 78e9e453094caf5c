"""Subcommand modules for sqlsheet.

register_commands() imports lazily so ``sqlsheet --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every standalone command on the root CLI group."""
    from sqlsheet.commands.check import check
    from sqlsheet.commands.render import render
    from sqlsheet.commands.sections import sections
    from sqlsheet.commands.show import show
    from sqlsheet.commands.snippets import snippets

    cli.add_command(show)
    cli.add_command(render)
    cli.add_command(sections)
    cli.add_command(snippets)
    cli.add_command(check)
