"""OpenTelemetry tracing for the MCP server.

Only ``opentelemetry-api`` is a hard dependency. Until
:func:`configure_telemetry` installs an SDK provider, every span below is a
no-op.

Usage::

    from kagimcp.utils.telemetry import request_span, tool_span

    with request_span("tools/call", 7):
        with tool_span("kagi_search_fetch") as span:
            ...
            span.set_attribute(ATTR_TOOL_IS_ERROR, False)

Spans never go to stdout, which carries the protocol.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace

ATTR_RPC_METHOD = "kagimcp.rpc.method"
ATTR_RPC_ID = "kagimcp.rpc.id"
ATTR_TOOL_NAME = "kagimcp.tool.name"
ATTR_TOOL_IS_ERROR = "kagimcp.tool.is_error"

_INSTRUMENTATION_NAME = "kagimcp"
_OTEL_HINT = "Install it with: pip install kagimcp[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Tracer for *name*; a no-op until an SDK provider is configured."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


@contextmanager
def request_span(method: str, request_id: int | str | None) -> Iterator[trace.Span]:
    """Span covering one JSON-RPC request."""
    with get_tracer("kagimcp.mcp").start_as_current_span("mcp.request") as span:
        span.set_attribute(ATTR_RPC_METHOD, method)
        span.set_attribute(ATTR_RPC_ID, str(request_id))
        yield span


@contextmanager
def tool_span(name: str) -> Iterator[trace.Span]:
    """Span covering one ``tools/call``; the caller records the outcome."""
    with get_tracer("kagimcp.tools").start_as_current_span("mcp.tools.call") as span:
        span.set_attribute(ATTR_TOOL_NAME, name)
        yield span


def configure_telemetry(
    *,
    service_name: str = "kagi-mcp-server",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider (requires ``kagimcp[otel]``).

    Console spans are written to stderr as they end; OTLP spans are batched.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk``, or ``opentelemetry-exporter-otlp`` when
        *otlp_endpoint* is set, is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for configure_telemetry(). {_OTEL_HINT}"
        raise ImportError(msg) from exc

    processors: list[Any] = []
    if export_to_console:
        processors.append(_stderr_processor())
    if otlp_endpoint:
        processors.append(_otlp_processor(otlp_endpoint))

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    for processor in processors:
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)


def _stderr_processor() -> Any:
    from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    return SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr))


def _otlp_processor(endpoint: str) -> Any:
    from opentelemetry.sdk.trace.export import BatchSpanProcessor  # pyright: ignore[reportMissingImports]

    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_OTEL_HINT}"
        raise ImportError(msg) from exc

    return BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))
