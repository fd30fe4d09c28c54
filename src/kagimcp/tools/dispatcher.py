"""ToolDispatcher — validates a ``tools/call`` and runs it against the Kagi API.

Every outcome, including upstream failures, comes back as a
:class:`~kagimcp.mcp.models.ToolResult`; only programming errors escape.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from kagimcp.api.errors import (
    AuthenticationError,
    InvalidTargetError,
    KagiAPIError,
    KagiError,
    QuotaExceededError,
    UpstreamTimeoutError,
)
from kagimcp.config import ToolName
from kagimcp.mcp.models import ToolResult
from kagimcp.tools.arguments import QueryArgs, SearchArgs, SummarizerArgs, ToolArguments
from kagimcp.tools.formatting import (
    format_answer,
    format_results,
    format_searches,
    structured_results,
)
from kagimcp.utils.telemetry import ATTR_TOOL_IS_ERROR, tool_span
from kagimcp.utils.validation import first_error

if TYPE_CHECKING:
    from kagimcp.api.models import SearchResponse
    from kagimcp.api.provider import KagiProvider
    from kagimcp.config import ServerConfig
    from kagimcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

_REDACTED = "[redacted]"

Handler = Callable[[Any], Awaitable[ToolResult]]


class ToolDispatcher:
    """Routes validated tool invocations to the upstream provider.

    Usage::

        dispatcher = ToolDispatcher(registry, client, config)
        result = await dispatcher.call("kagi_search_fetch", {"query": "rust"})

    No retries: a failed upstream call is reported immediately.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        provider: KagiProvider,
        config: ServerConfig,
    ) -> None:
        self._registry = registry
        self._provider = provider
        self._config = config
        self._handlers: dict[str, tuple[type[ToolArguments], Handler]] = {
            ToolName.SEARCH.value: (SearchArgs, self._search),
            ToolName.SUMMARIZER.value: (SummarizerArgs, self._summarize),
            ToolName.FASTGPT.value: (QueryArgs, self._fastgpt),
            ToolName.ENRICH_WEB.value: (QueryArgs, self._enrich_web),
            ToolName.ENRICH_NEWS.value: (QueryArgs, self._enrich_news),
        }

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    async def call(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run the named tool and return its result."""
        with tool_span(name) as span:
            result = await self._call(name, arguments)
            span.set_attribute(ATTR_TOOL_IS_ERROR, result.is_error)
        return result

    async def _call(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        if name not in self._registry or name not in self._handlers:
            available = ", ".join(self._registry) or "none"
            return ToolResult.error(f"Unknown tool: {name}. Available tools: {available}")

        violation = self._registry.validate(name, arguments)
        if violation is not None:
            return ToolResult.error(f"Invalid arguments for {name}: {violation}")

        model, handler = self._handlers[name]
        try:
            args = model.model_validate(arguments)
        except ValidationError as exc:
            return ToolResult.error(f"Invalid arguments for {name}: {first_error(exc)}")

        try:
            return await handler(args)
        except KagiError as exc:
            logger.warning("Tool %s failed upstream: %s", name, self._redact(str(exc)))
            return ToolResult.error(self._redact(describe_upstream_error(exc)))

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _search(self, args: SearchArgs) -> ToolResult:
        queries = args.all_queries
        if len(queries) == 1:
            response = await self._provider.search(queries[0], args.limit)
            return ToolResult.from_text(
                format_results(queries[0], response),
                structured=structured_results(queries[0], response),
            )

        outcomes = await asyncio.gather(
            *(self._provider.search(query, args.limit) for query in queries),
            return_exceptions=True,
        )
        searches: list[tuple[str, SearchResponse]] = []
        for query, outcome in zip(queries, outcomes):
            if isinstance(outcome, KagiError):
                logger.warning(
                    "Search for %r failed upstream: %s", query, self._redact(str(outcome))
                )
                message = f"Search failed for query '{query}': {describe_upstream_error(outcome)}"
                return ToolResult.error(self._redact(message))
            if isinstance(outcome, BaseException):
                raise outcome
            searches.append((query, outcome))

        structured = [structured_results(query, response) for query, response in searches]
        return ToolResult.from_text(format_searches(searches), structured={"searches": structured})

    async def _summarize(self, args: SummarizerArgs) -> ToolResult:
        summary = await self._provider.summarize(
            url=args.url,
            text=args.text,
            engine=args.engine or self._config.summarizer_engine,
            summary_type=args.summary_type,
            target_language=args.target_language,
        )
        return ToolResult.from_text(summary.output)

    async def _fastgpt(self, args: QueryArgs) -> ToolResult:
        answer = await self._provider.fastgpt(
            args.query,
            cache=self._config.fastgpt_cache,
            web_search=self._config.fastgpt_web_search,
        )
        return ToolResult.from_text(format_answer(answer), structured=answer.model_dump())

    async def _enrich_web(self, args: QueryArgs) -> ToolResult:
        response = await self._provider.enrich_web(args.query)
        return ToolResult.from_text(
            format_results(args.query, response, label="small web"),
            structured=structured_results(args.query, response),
        )

    async def _enrich_news(self, args: QueryArgs) -> ToolResult:
        response = await self._provider.enrich_news(args.query)
        return ToolResult.from_text(
            format_results(args.query, response, label="news"),
            structured=structured_results(args.query, response),
        )

    def _redact(self, text: str) -> str:
        secret = self._config.api_key.get_secret_value()
        if secret:
            text = text.replace(secret, _REDACTED)
        return text


def describe_upstream_error(exc: KagiError) -> str:
    """Message for the host that keeps the failure category and HTTP status."""
    if isinstance(exc, AuthenticationError):
        base = f"Authentication failed (HTTP {exc.status}): the Kagi API rejected the configured API key"
    elif isinstance(exc, QuotaExceededError):
        base = f"Rate limit or API quota exceeded (HTTP {exc.status})"
    elif isinstance(exc, InvalidTargetError):
        base = f"Not found or invalid target (HTTP {exc.status})"
    elif isinstance(exc, KagiAPIError):
        base = f"Kagi API error (HTTP {exc.status})"
    elif isinstance(exc, UpstreamTimeoutError):
        return f"Kagi API request timed out after {exc.timeout}s"
    else:
        return str(exc)

    return f"{base}: {exc.detail}" if exc.detail else base
