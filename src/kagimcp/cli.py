"""kagimcp CLI entrypoint.

MCP hosts usually launch the bare ``kagimcp`` command, so a missing
subcommand runs ``serve`` with its options read from the environment.
"""

from __future__ import annotations

import click

from kagimcp import __version__
from kagimcp.cli_commands import register_commands
from kagimcp.cli_commands.serve import serve


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="kagimcp")
@click.pass_context
def main(ctx: click.Context) -> None:
    """kagimcp — Kagi search, summarizer and FastGPT tools for MCP hosts."""
    if ctx.invoked_subcommand is None:
        with serve.make_context("serve", [], parent=ctx) as serve_ctx:
            serve.invoke(serve_ctx)


register_commands(main)

if __name__ == "__main__":
    main()
