"""Kagi API client — search, summarizer, FastGPT and enrichment."""

from kagimcp.api.client import API_BASE_URL, KagiClient
from kagimcp.api.errors import (
    AuthenticationError,
    InvalidTargetError,
    KagiAPIError,
    KagiError,
    MalformedResponseError,
    QuotaExceededError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
)
from kagimcp.api.models import (
    FastGPTAnswer,
    Reference,
    SearchResponse,
    SearchResult,
    SummarizerEngine,
    Summary,
    SummaryType,
)
from kagimcp.api.provider import KagiProvider

__all__ = [
    "API_BASE_URL",
    "AuthenticationError",
    "FastGPTAnswer",
    "InvalidTargetError",
    "KagiAPIError",
    "KagiClient",
    "KagiError",
    "KagiProvider",
    "MalformedResponseError",
    "QuotaExceededError",
    "Reference",
    "SearchResponse",
    "SearchResult",
    "SummarizerEngine",
    "Summary",
    "SummaryType",
    "UpstreamConnectionError",
    "UpstreamTimeoutError",
]
