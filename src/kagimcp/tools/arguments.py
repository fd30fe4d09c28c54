"""Typed tool arguments.

``tools/call`` arguments arrive as dynamic JSON. Once they pass the
descriptor's JSON schema they are converted into these models, and nothing
past the dispatcher sees the raw dict.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kagimcp.api.models import SummarizerEngine, SummaryType


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class SearchArgs(ToolArguments):
    """A single ``query``, a batch of ``queries``, or both (``query`` runs first)."""

    query: str | None = Field(default=None, min_length=1)
    queries: list[str] | None = Field(default=None, min_length=1)
    limit: int | None = Field(default=None, ge=1, le=100)

    @model_validator(mode="after")
    def _some_query(self) -> SearchArgs:
        if not self.query and not self.queries:
            msg = "one of 'query' or 'queries' is required"
            raise ValueError(msg)
        return self

    @property
    def all_queries(self) -> list[str]:
        head = [self.query] if self.query else []
        return head + list(self.queries or [])


class SummarizerArgs(ToolArguments):
    url: str | None = None
    text: str | None = None
    summary_type: SummaryType = SummaryType.SUMMARY
    engine: SummarizerEngine | None = None
    target_language: str | None = None

    @model_validator(mode="after")
    def _one_target(self) -> SummarizerArgs:
        if not self.url and not self.text:
            msg = "one of 'url' or 'text' is required"
            raise ValueError(msg)
        if self.url and self.text:
            msg = "provide only one of 'url' or 'text', not both"
            raise ValueError(msg)
        return self


class QueryArgs(ToolArguments):
    """Arguments for the single-query tools (FastGPT and the enrichment indexes)."""

    query: str = Field(min_length=1)
