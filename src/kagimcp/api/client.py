"""KagiClient — async HTTP client for the Kagi API.

Satisfies the :class:`~kagimcp.api.provider.KagiProvider` protocol.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from kagimcp.api.errors import (
    MalformedResponseError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
    error_for_status,
)
from kagimcp.api.models import (
    ApiErrorDetail,
    FastGPTAnswer,
    SearchResponse,
    SummarizerEngine,
    Summary,
    SummaryType,
)

API_BASE_URL = "https://kagi.com/api/v0"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class KagiClient:
    """Async context manager wrapping an :class:`httpx.AsyncClient`.

    Usage::

        async with KagiClient("your-api-key") as client:
            results = await client.search("rust programming", limit=10)
            summary = await client.summarize(url="https://example.com/article")

    Each call makes exactly one HTTP request; retries are left to the caller.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> KagiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bot {self._api_key}"},
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "KagiClient must be used as an async context manager"
            raise RuntimeError(msg)
        return self._client

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def search(self, query: str, limit: int | None = None) -> SearchResponse:
        """``GET /search``."""
        params: dict[str, Any] = {"q": query}
        if limit is not None:
            params["limit"] = limit
        payload = await self._request("GET", "/search", params=params)
        return self._parse("/search", SearchResponse, payload)

    async def summarize(
        self,
        *,
        url: str | None = None,
        text: str | None = None,
        engine: SummarizerEngine | None = None,
        summary_type: SummaryType | None = None,
        target_language: str | None = None,
    ) -> Summary:
        """``POST /summarize`` for either a URL or raw text."""
        if (url is None) == (text is None):
            msg = "exactly one of 'url' or 'text' is required"
            raise ValueError(msg)

        body: dict[str, Any] = {"url": url} if url is not None else {"text": text}
        if engine is not None:
            body["engine"] = engine.value
        if summary_type is not None:
            body["summary_type"] = summary_type.value
        if target_language:
            body["target_language"] = target_language

        payload = await self._request("POST", "/summarize", json=body)
        return self._parse("/summarize", Summary, payload.get("data"))

    async def fastgpt(
        self, query: str, *, cache: bool = True, web_search: bool = True
    ) -> FastGPTAnswer:
        """``POST /fastgpt``."""
        body = {"query": query, "cache": cache, "web_search": web_search}
        payload = await self._request("POST", "/fastgpt", json=body)
        return self._parse("/fastgpt", FastGPTAnswer, payload.get("data"))

    async def enrich_web(self, query: str) -> SearchResponse:
        """``GET /enrich/web``: non-commercial "small web" results."""
        payload = await self._request("GET", "/enrich/web", params={"q": query})
        return self._parse("/enrich/web", SearchResponse, payload)

    async def enrich_news(self, query: str) -> SearchResponse:
        """``GET /enrich/news``: non-mainstream news sources."""
        payload = await self._request("GET", "/enrich/news", params={"q": query})
        return self._parse("/enrich/news", SearchResponse, payload)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        logger.debug("Kagi API %s %s", method, path)
        try:
            response = await self._http().request(method, path, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(self._timeout) from exc
        except httpx.HTTPError as exc:
            raise UpstreamConnectionError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            detail = self._error_detail(response)
            logger.info("Kagi API %s %s returned HTTP %d", method, path, response.status_code)
            raise error_for_status(response.status_code, detail)

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError(path, "body is not JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError(path, "body is not a JSON object")
        return payload

    @staticmethod
    def _parse(endpoint: str, model: type[_ModelT], data: Any) -> _ModelT:
        if data is None:
            raise MalformedResponseError(endpoint, "missing 'data'")
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponseError(endpoint, str(exc.errors()[0]["msg"])) from exc

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Pull the human-readable message out of a Kagi error body."""
        try:
            body = response.json()
        except ValueError:
            return response.text.strip()[:200]

        errors = body.get("error") if isinstance(body, dict) else None
        if isinstance(errors, list):
            messages: list[str] = []
            for raw in errors:
                if not isinstance(raw, dict):
                    continue
                try:
                    detail = ApiErrorDetail.model_validate(raw)
                except ValidationError:
                    logger.debug("Ignoring malformed error entry: %r", raw)
                    continue
                if detail.msg:
                    messages.append(detail.msg)
            if messages:
                return "; ".join(messages)
        return ""
