"""``kagimcp tools`` — inspect the tool registry without starting the server."""

from __future__ import annotations

import json
import sys

import click

from kagimcp.cli_commands._output import console, err_console, print_tools_table


@click.group()
def tools() -> None:
    """Inspect the tools this server exposes."""


@tools.command("list")
@click.option(
    "--disable-tool",
    "disabled_tools",
    multiple=True,
    envvar="KAGI_DISABLED_TOOLS",
    help="Leave a tool out, as `serve` would.",
)
@click.option("--json", "as_json", is_flag=True, help="Output the tools/list payload as JSON.")
def list_tools(disabled_tools: tuple[str, ...], as_json: bool) -> None:
    """List the tools an MCP host would discover."""
    from kagimcp.config import ConfigError, ToolFlags
    from kagimcp.tools.registry import ToolRegistry

    try:
        flags = ToolFlags.disabling(disabled_tools)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    registry = ToolRegistry.from_flags(flags)

    if as_json:
        payload = {"tools": [d.to_wire() for d in registry.descriptors()]}
        console.print_json(json.dumps(payload))
        return

    if not len(registry):
        console.print("[yellow]No tools enabled.[/yellow]")
        return

    print_tools_table(registry.descriptors())
