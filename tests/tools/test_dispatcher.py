"""Tests for ToolDispatcher."""

from __future__ import annotations

import pytest

from kagimcp.api.errors import (
    AuthenticationError,
    InvalidTargetError,
    KagiAPIError,
    MalformedResponseError,
    QuotaExceededError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from kagimcp.api.models import SummarizerEngine, SummaryType
from kagimcp.config import ToolFlags, resolve_config
from kagimcp.tools.dispatcher import ToolDispatcher, describe_upstream_error
from kagimcp.tools.registry import ToolRegistry
from tests.helpers import API_KEY, StubProvider


class TestSearch:
    async def test_passes_query_and_limit(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_search_fetch", {"query": "rust", "limit": 3})

        assert not result.is_error
        assert provider.calls == [("search", {"query": "rust", "limit": 3})]
        assert "3: Result 3" in result.text
        assert result.structured_content is not None
        assert len(result.structured_content["results"]) == 3

    async def test_limit_defaults_to_upstream(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        await dispatcher.call("kagi_search_fetch", {"query": "rust"})
        assert provider.calls[0][1]["limit"] is None

    async def test_limit_out_of_range(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_search_fetch", {"query": "rust", "limit": 500})

        assert result.is_error
        assert result.text.startswith("Invalid arguments for kagi_search_fetch: 'limit'")
        assert provider.calls == []

    async def test_blank_query_rejected(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_search_fetch", {"query": ""})
        assert result.is_error
        assert provider.calls == []

    async def test_query_or_queries_required(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_search_fetch", {"limit": 3})

        assert result.is_error
        assert result.text == (
            "Invalid arguments for kagi_search_fetch: one of 'query' or 'queries' is required"
        )
        assert provider.calls == []


class TestSearchBatch:
    async def test_numbered_continuously(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_search_fetch", {"queries": ["rust", "go"], "limit": 2})

        assert not result.is_error
        assert sorted(kwargs["query"] for _, kwargs in provider.calls) == ["go", "rust"]
        assert all(kwargs["limit"] == 2 for _, kwargs in provider.calls)
        rust, go = result.text.split('Results for search query "go":')
        assert 'Results for search query "rust":' in rust
        assert "1: Result 1" in rust
        assert "2: Result 2" in rust
        assert "3: Result 1" in go
        assert "4: Result 2" in go
        assert result.structured_content is not None
        assert [s["query"] for s in result.structured_content["searches"]] == ["rust", "go"]

    async def test_query_runs_before_queries(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.call(
            "kagi_search_fetch", {"query": "first", "queries": ["second"], "limit": 1}
        )

        assert result.text.index('"first"') < result.text.index('"second"')
        assert "2: Result 1" in result.text

    async def test_single_entry_batch_matches_query(self, dispatcher: ToolDispatcher) -> None:
        batch = await dispatcher.call("kagi_search_fetch", {"queries": ["rust"], "limit": 3})
        single = await dispatcher.call("kagi_search_fetch", {"query": "rust", "limit": 3})

        assert batch.text == single.text
        assert batch.structured_content == single.structured_content

    async def test_failure_names_the_query(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        provider.errors["go"] = QuotaExceededError(429, "slow down")
        result = await dispatcher.call("kagi_search_fetch", {"queries": ["rust", "go", "zig"]})

        assert result.is_error
        assert result.text == (
            "Search failed for query 'go': Rate limit or API quota exceeded (HTTP 429): slow down"
        )

    async def test_failure_redacts_key(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        provider.errors["go"] = UpstreamConnectionError(f"https://x?token={API_KEY}")
        result = await dispatcher.call("kagi_search_fetch", {"queries": ["rust", "go"]})

        assert result.is_error
        assert API_KEY not in result.text
        assert "[redacted]" in result.text


class TestSummarizer:
    async def test_url_uses_configured_engine(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_summarizer", {"url": "https://example.com/post"})

        assert result.text == "Summary of https://example.com/post"
        _, kwargs = provider.calls[0]
        assert kwargs["engine"] is SummarizerEngine.CECIL
        assert kwargs["summary_type"] is SummaryType.SUMMARY
        assert kwargs["text"] is None

    async def test_explicit_options(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        await dispatcher.call(
            "kagi_summarizer",
            {
                "text": "A long article.",
                "engine": "muriel",
                "summary_type": "takeaway",
                "target_language": "FR",
            },
        )

        _, kwargs = provider.calls[0]
        assert kwargs["engine"] is SummarizerEngine.MURIEL
        assert kwargs["summary_type"] is SummaryType.TAKEAWAY
        assert kwargs["target_language"] == "FR"
        assert kwargs["text"] == "A long article."

    async def test_engine_from_config(self, provider: StubProvider) -> None:
        config = resolve_config(api_key=API_KEY, summarizer_engine="daphne")
        dispatcher = ToolDispatcher(ToolRegistry.from_flags(config.tools), provider, config)

        await dispatcher.call("kagi_summarizer", {"url": "https://example.com"})
        assert provider.calls[0][1]["engine"] is SummarizerEngine.DAPHNE

    async def test_requires_url_or_text(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        result = await dispatcher.call("kagi_summarizer", {})

        assert result.is_error
        assert result.text == (
            "Invalid arguments for kagi_summarizer: one of 'url' or 'text' is required"
        )
        assert provider.calls == []

    async def test_rejects_both(self, dispatcher: ToolDispatcher, provider: StubProvider) -> None:
        result = await dispatcher.call("kagi_summarizer", {"url": "https://x", "text": "y"})

        assert result.is_error
        assert "not both" in result.text
        assert provider.calls == []


class TestFastGPTAndEnrich:
    async def test_fastgpt_uses_config_flags(self, provider: StubProvider) -> None:
        config = resolve_config(api_key=API_KEY, fastgpt_cache=False, fastgpt_web_search=False)
        dispatcher = ToolDispatcher(ToolRegistry.from_flags(config.tools), provider, config)

        result = await dispatcher.call("kagi_fastgpt", {"query": "python 3.11 release"})

        assert provider.calls == [
            ("fastgpt", {"query": "python 3.11 release", "cache": False, "web_search": False})
        ]
        assert "References:" in result.text
        assert result.structured_content is not None
        assert result.structured_content["references"][0]["title"] == "Python 3.11 release"

    async def test_enrich_web(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.call("kagi_enrich_web", {"query": "indie"})
        assert 'Results for small web query "indie":' in result.text
        assert "2: Small web 2" in result.text

    async def test_enrich_news(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.call("kagi_enrich_news", {"query": "elections"})
        assert 'Results for news query "elections":' in result.text
        assert "3: News 3" in result.text


class TestUnknownAndDisabled:
    async def test_unknown_tool_lists_available(self, dispatcher: ToolDispatcher) -> None:
        result = await dispatcher.call("kagi_images", {})

        assert result.is_error
        assert result.text.startswith("Unknown tool: kagi_images.")
        assert "kagi_search_fetch" in result.text

    async def test_disabled_tool_is_unknown(self, provider: StubProvider) -> None:
        config = resolve_config(api_key=API_KEY, disabled_tools=["kagi_summarizer"])
        dispatcher = ToolDispatcher(ToolRegistry.from_flags(config.tools), provider, config)

        result = await dispatcher.call("kagi_summarizer", {"url": "https://x"})

        assert result.is_error
        assert "Unknown tool" in result.text
        assert provider.calls == []

    async def test_nothing_enabled(self, provider: StubProvider) -> None:
        config = resolve_config(api_key=API_KEY)
        flags = ToolFlags(
            search=False, summarizer=False, fastgpt=False, enrich_web=False, enrich_news=False
        )
        dispatcher = ToolDispatcher(ToolRegistry.from_flags(flags), provider, config)

        result = await dispatcher.call("kagi_search_fetch", {"query": "q"})
        assert result.text.endswith("Available tools: none")


class TestUpstreamErrors:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (AuthenticationError(401), "Authentication failed (HTTP 401)"),
            (QuotaExceededError(429, "slow down"), "Rate limit or API quota exceeded (HTTP 429): slow down"),
            (InvalidTargetError(404), "Not found or invalid target (HTTP 404)"),
            (KagiAPIError(500, "oops"), "Kagi API error (HTTP 500): oops"),
            (UpstreamTimeoutError(5.0), "Kagi API request timed out after 5.0s"),
        ],
    )
    async def test_error_becomes_tool_result(
        self,
        dispatcher: ToolDispatcher,
        provider: StubProvider,
        error: Exception,
        expected: str,
    ) -> None:
        provider.errors["search"] = error
        result = await dispatcher.call("kagi_search_fetch", {"query": "rust"})

        assert result.is_error
        assert result.text.startswith(expected)

    async def test_api_key_is_redacted(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        provider.errors["enrich_news"] = UpstreamConnectionError(f"https://x?token={API_KEY}")
        result = await dispatcher.call("kagi_enrich_news", {"query": "q"})

        assert result.is_error
        assert API_KEY not in result.text
        assert "[redacted]" in result.text

    async def test_malformed_response(
        self, dispatcher: ToolDispatcher, provider: StubProvider
    ) -> None:
        provider.errors["fastgpt"] = MalformedResponseError("/fastgpt", "missing 'data'")
        result = await dispatcher.call("kagi_fastgpt", {"query": "q"})

        assert result.is_error
        assert "/fastgpt" in result.text


class TestDescribeUpstreamError:
    def test_auth_message_mentions_key(self) -> None:
        message = describe_upstream_error(AuthenticationError(403, "Forbidden"))
        assert message == (
            "Authentication failed (HTTP 403): the Kagi API rejected the configured API key: "
            "Forbidden"
        )

    def test_connection_error_passthrough(self) -> None:
        assert describe_upstream_error(UpstreamConnectionError("ConnectError: refused")) == (
            "Kagi API request failed: ConnectError: refused"
        )
