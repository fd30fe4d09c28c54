"""KagiProvider protocol — the upstream capabilities the tool dispatcher consumes.

:class:`~kagimcp.api.client.KagiClient` satisfies it over HTTP; tests pass
in-memory stubs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kagimcp.api.models import (
        FastGPTAnswer,
        SearchResponse,
        SummarizerEngine,
        Summary,
        SummaryType,
    )


@runtime_checkable
class KagiProvider(Protocol):
    """Async access to the Kagi search, summarizer, FastGPT and enrichment APIs.

    Every method raises a :class:`~kagimcp.api.errors.KagiError` subclass on
    failure.
    """

    async def search(self, query: str, limit: int | None = None) -> SearchResponse:
        """Run a web search."""
        ...

    async def summarize(
        self,
        *,
        url: str | None = None,
        text: str | None = None,
        engine: SummarizerEngine | None = None,
        summary_type: SummaryType | None = None,
        target_language: str | None = None,
    ) -> Summary:
        """Summarize a URL or a block of text (exactly one of them)."""
        ...

    async def fastgpt(
        self, query: str, *, cache: bool = True, web_search: bool = True
    ) -> FastGPTAnswer:
        """Ask FastGPT and return the answer with its references."""
        ...

    async def enrich_web(self, query: str) -> SearchResponse:
        """Query the small-web (Teclis) index."""
        ...

    async def enrich_news(self, query: str) -> SearchResponse:
        """Query the news (TinyGem) index."""
        ...
