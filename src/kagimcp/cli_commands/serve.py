"""``kagimcp serve`` — run the MCP server over stdin/stdout."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from kagimcp.api.client import API_BASE_URL, DEFAULT_TIMEOUT
from kagimcp.cli_commands._output import LOG_LEVELS, configure_logging, err_console
from kagimcp.config import ConfigError, resolve_config
from kagimcp.mcp.errors import TransportError

if TYPE_CHECKING:
    from kagimcp.config import ServerConfig

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--api-key",
    envvar="KAGI_API_KEY",
    default=None,
    help="Kagi API key (or set KAGI_API_KEY).",
)
@click.option(
    "--summarizer-engine",
    envvar="KAGI_SUMMARIZER_ENGINE",
    default="cecil",
    show_default=True,
    help="Default Universal Summarizer engine: cecil, agnes, daphne or muriel.",
)
@click.option(
    "--disable-tool",
    "disabled_tools",
    multiple=True,
    envvar="KAGI_DISABLED_TOOLS",
    help="Hide a tool from tools/list (repeatable, e.g. kagi_fastgpt).",
)
@click.option(
    "--fastgpt-cache/--no-fastgpt-cache",
    default=True,
    envvar="KAGI_FASTGPT_CACHE",
    help="Allow FastGPT to return cached answers.",
)
@click.option(
    "--fastgpt-web-search/--no-fastgpt-web-search",
    default=True,
    envvar="KAGI_FASTGPT_WEB_SEARCH",
    help="Ground FastGPT answers in web search results.",
)
@click.option("--base-url", envvar="KAGI_API_BASE_URL", default=API_BASE_URL, help="Kagi API base URL.")
@click.option(
    "--timeout",
    type=float,
    envvar="KAGI_API_TIMEOUT",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Upstream request timeout in seconds.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar="KAGI_MCP_LOG_LEVEL",
    default="WARNING",
    show_default=True,
    help="Log level for stderr diagnostics.",
)
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
@click.option("--otlp-endpoint", default=None, help="Export spans via OTLP/gRPC to this endpoint.")
def serve(
    api_key: str | None,
    summarizer_engine: str,
    disabled_tools: tuple[str, ...],
    fastgpt_cache: bool,
    fastgpt_web_search: bool,
    base_url: str,
    timeout: float,
    log_level: str,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Serve Kagi tools to an MCP host over stdin/stdout."""
    configure_logging(log_level)

    try:
        config = resolve_config(
            api_key=api_key,
            summarizer_engine=summarizer_engine,
            disabled_tools=disabled_tools,
            fastgpt_cache=fastgpt_cache,
            fastgpt_web_search=fastgpt_web_search,
            base_url=base_url,
            timeout=timeout,
        )
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    if telemetry or otlp_endpoint:
        from kagimcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(export_to_console=otlp_endpoint is None, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            err_console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    try:
        asyncio.run(run_server(config))
    except TransportError as exc:
        err_console.print(f"[red]Transport error:[/red] {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


async def run_server(config: ServerConfig) -> None:
    """Wire the Kagi client, registry, dispatcher and session, then serve stdio."""
    from kagimcp.api.client import KagiClient
    from kagimcp.mcp.server import MCPServer
    from kagimcp.mcp.session import Session
    from kagimcp.mcp.transport import StdioTransport
    from kagimcp.tools.dispatcher import ToolDispatcher
    from kagimcp.tools.registry import ToolRegistry

    registry = ToolRegistry.from_flags(config.tools)
    logger.info("Serving %d tool(s): %s", len(registry), ", ".join(registry))

    async with KagiClient(
        config.api_key.get_secret_value(),
        base_url=config.base_url,
        timeout=config.timeout,
    ) as client:
        transport = await StdioTransport.connect()
        dispatcher = ToolDispatcher(registry, client, config)
        server = MCPServer(Session(config), dispatcher, transport)
        await server.serve()
