"""Server configuration — API key, summarizer engine, per-tool flags.

Resolved once at startup (by the CLI) into a frozen :class:`ServerConfig`
that is passed by reference into the session and the tool dispatcher.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, SecretStr

from kagimcp.api.client import API_BASE_URL, DEFAULT_TIMEOUT
from kagimcp.api.models import SummarizerEngine

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Required configuration is missing or unusable."""


class ToolName(str, Enum):
    """Names of the tools this server can expose."""

    SEARCH = "kagi_search_fetch"
    SUMMARIZER = "kagi_summarizer"
    FASTGPT = "kagi_fastgpt"
    ENRICH_WEB = "kagi_enrich_web"
    ENRICH_NEWS = "kagi_enrich_news"


class ToolFlags(BaseModel):
    """Per-tool enable switches. Every tool is enabled by default."""

    model_config = ConfigDict(frozen=True)

    search: bool = True
    summarizer: bool = True
    fastgpt: bool = True
    enrich_web: bool = True
    enrich_news: bool = True

    def is_enabled(self, name: str) -> bool:
        field = _FLAG_FIELDS.get(name)
        return field is not None and bool(getattr(self, field))

    @classmethod
    def disabling(cls, names: Iterable[str]) -> ToolFlags:
        """Build flags with the named tools switched off.

        Accepts either full tool names (``kagi_fastgpt``) or the flag names
        (``fastgpt``); an entry may hold several comma-separated names.
        """
        off: dict[str, bool] = {}
        for raw in names:
            for part in raw.split(","):
                name = part.strip()
                if not name:
                    continue
                field = _FLAG_FIELDS.get(name, name)
                if field not in cls.model_fields:
                    msg = f"Unknown tool name: {name!r}"
                    raise ConfigError(msg)
                off[field] = False
        return cls(**off)


_FLAG_FIELDS: dict[str, str] = {
    ToolName.SEARCH.value: "search",
    ToolName.SUMMARIZER.value: "summarizer",
    ToolName.FASTGPT.value: "fastgpt",
    ToolName.ENRICH_WEB.value: "enrich_web",
    ToolName.ENRICH_NEWS.value: "enrich_news",
}


class ServerConfig(BaseModel):
    """Immutable configuration snapshot shared by every request handler."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    summarizer_engine: SummarizerEngine = SummarizerEngine.CECIL
    tools: ToolFlags = ToolFlags()
    fastgpt_cache: bool = True
    fastgpt_web_search: bool = True
    base_url: str = API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


def parse_engine(value: str | None) -> SummarizerEngine:
    """Map an engine name to :class:`SummarizerEngine`.

    Unknown names fall back to ``cecil`` with a warning rather than failing
    startup.
    """
    if not value:
        return SummarizerEngine.CECIL
    try:
        return SummarizerEngine(value.strip().lower())
    except ValueError:
        logger.warning("Unknown summarizer engine %r, defaulting to 'cecil'", value)
        return SummarizerEngine.CECIL


def resolve_config(
    *,
    api_key: str | None,
    summarizer_engine: str | None = None,
    disabled_tools: Iterable[str] = (),
    fastgpt_cache: bool = True,
    fastgpt_web_search: bool = True,
    base_url: str | None = None,
    timeout: float | None = None,
) -> ServerConfig:
    """Build the :class:`ServerConfig` from CLI/environment values.

    Raises
    ------
    ConfigError
        If the API key is missing or blank, or a disabled tool name is unknown.
    """
    if api_key is None or not api_key.strip():
        msg = "KAGI_API_KEY must be provided via --api-key or the environment"
        raise ConfigError(msg)

    return ServerConfig(
        api_key=SecretStr(api_key.strip()),
        summarizer_engine=parse_engine(summarizer_engine),
        tools=ToolFlags.disabling(disabled_tools),
        fastgpt_cache=fastgpt_cache,
        fastgpt_web_search=fastgpt_web_search,
        base_url=base_url or API_BASE_URL,
        timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
    )
