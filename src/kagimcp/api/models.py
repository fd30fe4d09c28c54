"""Kagi API models — typed responses for search, summarizer, FastGPT and enrichment.

References:
- https://help.kagi.com/kagi/api/search.html
- https://help.kagi.com/kagi/api/summarizer.html
- https://help.kagi.com/kagi/api/fastgpt.html
- https://help.kagi.com/kagi/api/enrich.html
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SummarizerEngine(str, Enum):
    """Universal Summarizer engines."""

    CECIL = "cecil"
    AGNES = "agnes"
    DAPHNE = "daphne"
    MURIEL = "muriel"


class SummaryType(str, Enum):
    """``summary`` is paragraph prose, ``takeaway`` a bulleted list."""

    SUMMARY = "summary"
    TAKEAWAY = "takeaway"


# ---------------------------------------------------------------------------
# Shared envelope
# ---------------------------------------------------------------------------


class Meta(BaseModel):
    """The ``meta`` object present on every Kagi API response."""

    id: str = ""
    node: str = ""
    ms: int = 0
    api_balance: float | None = None


class Thumbnail(BaseModel):
    url: str
    width: int | None = None
    height: int | None = None


class SearchResult(BaseModel):
    """One entry of a search or enrichment response.

    ``t == 0`` is a search result, ``t == 1`` a block of related searches
    carried in ``list``.
    """

    t: int = 0
    rank: int | None = None
    url: str = ""
    title: str = ""
    snippet: str | None = None
    published: str | None = None
    thumbnail: Thumbnail | None = None
    related: list[str] = Field(default_factory=list, alias="list")

    model_config = {"populate_by_name": True}

    @property
    def is_result(self) -> bool:
        return self.t == 0


class SearchResponse(BaseModel):
    """Response of ``/search``, ``/enrich/web`` and ``/enrich/news``."""

    meta: Meta = Field(default_factory=Meta)
    data: list[SearchResult] = Field(default_factory=list)

    @property
    def results(self) -> list[SearchResult]:
        """Only the ``t == 0`` entries, in API order."""
        return [item for item in self.data if item.is_result]

    @property
    def related_searches(self) -> list[str]:
        related: list[str] = []
        for item in self.data:
            if item.t == 1:
                related.extend(item.related)
        return related


class Summary(BaseModel):
    """``data`` of a ``/summarize`` response."""

    output: str
    tokens: int | None = None


class Reference(BaseModel):
    title: str = ""
    snippet: str = ""
    url: str = ""


class FastGPTAnswer(BaseModel):
    """``data`` of a ``/fastgpt`` response."""

    output: str
    tokens: int | None = None
    references: list[Reference] = Field(default_factory=list)


class ApiErrorDetail(BaseModel):
    """One element of the ``error`` array on a failed response."""

    code: int | str | None = None
    msg: str | None = None
    ref: Any = None
