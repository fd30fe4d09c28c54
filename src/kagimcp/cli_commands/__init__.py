"""Subcommands of the ``kagimcp`` group."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kagimcp.cli_commands.serve import serve
from kagimcp.cli_commands.tools import tools

if TYPE_CHECKING:
    import click

COMMANDS = (serve, tools)


def register_commands(cli: click.Group) -> None:
    for command in COMMANDS:
        cli.add_command(command)
