"""Test doubles shared across the suite: an in-memory Kagi provider and a scripted transport."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from kagimcp.api.models import (
    FastGPTAnswer,
    Reference,
    SearchResponse,
    SearchResult,
    SummarizerEngine,
    Summary,
    SummaryType,
)
from kagimcp.config import ServerConfig
from kagimcp.mcp.server import MCPServer
from kagimcp.mcp.session import Session
from kagimcp.tools.dispatcher import ToolDispatcher

API_KEY = "sk-test-0123456789abcdef"


def make_search_response(count: int, *, prefix: str = "Result") -> SearchResponse:
    return SearchResponse(
        data=[
            SearchResult(
                t=0,
                rank=i,
                url=f"https://example.com/{i}",
                title=f"{prefix} {i}",
                snippet=f"Snippet {i}",
            )
            for i in range(1, count + 1)
        ]
    )


class StubProvider:
    """In-memory stand-in for :class:`~kagimcp.api.client.KagiClient`.

    ``delays`` maps a query to seconds to sleep before answering; ``errors``
    maps a method name, or a query, to an exception to raise.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.delays: dict[str, float] = {}
        self.errors: dict[str, Exception] = {}

    async def _enter(self, method: str, key: str | None = None, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        if key is not None and key in self.delays:
            await asyncio.sleep(self.delays[key])
        for name in (method, key):
            if name is not None and name in self.errors:
                raise self.errors[name]

    async def search(self, query: str, limit: int | None = None) -> SearchResponse:
        await self._enter("search", query, query=query, limit=limit)
        return make_search_response(limit or 10)

    async def summarize(
        self,
        *,
        url: str | None = None,
        text: str | None = None,
        engine: SummarizerEngine | None = None,
        summary_type: SummaryType | None = None,
        target_language: str | None = None,
    ) -> Summary:
        await self._enter(
            "summarize",
            url=url,
            text=text,
            engine=engine,
            summary_type=summary_type,
            target_language=target_language,
        )
        return Summary(output=f"Summary of {url or 'text'}", tokens=42)

    async def fastgpt(
        self, query: str, *, cache: bool = True, web_search: bool = True
    ) -> FastGPTAnswer:
        await self._enter("fastgpt", query, query=query, cache=cache, web_search=web_search)
        return FastGPTAnswer(
            output="Python 3.11 was released in October 2022 [1].",
            tokens=120,
            references=[
                Reference(
                    title="Python 3.11 release",
                    snippet="Python 3.11.0 is the newest major release.",
                    url="https://www.python.org/downloads/release/python-3110/",
                )
            ],
        )

    async def enrich_web(self, query: str) -> SearchResponse:
        await self._enter("enrich_web", query, query=query)
        return make_search_response(2, prefix="Small web")

    async def enrich_news(self, query: str) -> SearchResponse:
        await self._enter("enrich_news", query, query=query)
        return make_search_response(3, prefix="News")


class ScriptedTransport:
    """Feeds pre-recorded frames and collects written frames."""

    def __init__(self, frames: list[str]) -> None:
        self._frames = frames
        self.written: list[str] = []

    async def frames(self):  # type: ignore[no-untyped-def]
        for frame in self._frames:
            yield frame

    def write(self, frame: str) -> None:
        self.written.append(frame)

    def responses(self) -> list[dict[str, Any]]:
        return [json.loads(frame) for frame in self.written]


def rpc(method: str, params: Any = None, *, id: int | str | None = 1) -> str:
    """Encode a JSON-RPC request (a notification when *id* is None)."""
    message: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if id is not None:
        message["id"] = id
    if params is not None:
        message["params"] = params
    return json.dumps(message)


INITIALIZE = rpc(
    "initialize",
    {
        "protocolVersion": "2024-11-05",
        "capabilities": {"roots": {"listChanged": True}},
        "clientInfo": {"name": "test-host", "version": "1.0"},
    },
    id=0,
)


def make_server(
    frames: list[str],
    dispatcher: ToolDispatcher,
    config: ServerConfig,
) -> tuple[MCPServer, ScriptedTransport]:
    transport = ScriptedTransport(frames)
    server = MCPServer(Session(config), dispatcher, transport)
    return server, transport
