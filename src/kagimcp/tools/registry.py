"""Tool registry — the static table of tool descriptors.

Built once at startup from :data:`TOOL_DESCRIPTORS`, filtered by the
configured feature flags, and read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from jsonschema.exceptions import best_match
from jsonschema.validators import Draft202012Validator

from kagimcp.config import ToolFlags, ToolName
from kagimcp.mcp.models import ToolDescriptor

_QUERY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "minLength": 1,
            "description": "A concise, keyword-focused query.",
        },
    },
    "required": ["query"],
}

TOOL_DESCRIPTORS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=ToolName.SEARCH.value,
        description=(
            "Fetch web results for one or more queries using the Kagi Search API. Use for "
            "general search and when the user explicitly tells you to 'fetch' "
            "results/information. Provide 'query', or 'queries' to run several searches at "
            "once. Results are numbered continuously across queries, so that a user may "
            "refer to a result by its number."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "minLength": 1,
                    "description": (
                        "A concise, keyword-focused search query. Include essential "
                        "context within the query for standalone use."
                    ),
                },
                "queries": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                    "minItems": 1,
                    "description": (
                        "Several concise, keyword-focused queries, searched concurrently. "
                        "Each query should stand on its own."
                    ),
                },
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 100,
                    "description": "Maximum number of results to return per query.",
                },
            },
        },
    ),
    ToolDescriptor(
        name=ToolName.SUMMARIZER.value,
        description=(
            "Summarize content from a URL or a block of text using the Kagi Universal "
            "Summarizer API. The Summarizer can summarize any document type (text "
            "webpage, video, audio, etc.). Provide exactly one of 'url' or 'text'."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "url": {"type": "string", "description": "A URL to a document to summarize."},
                "text": {"type": "string", "description": "Raw text to summarize."},
                "summary_type": {
                    "type": "string",
                    "enum": ["summary", "takeaway"],
                    "default": "summary",
                    "description": (
                        "Type of summary to produce. 'summary' for paragraph prose and "
                        "'takeaway' for a bulleted list of key points."
                    ),
                },
                "engine": {
                    "type": "string",
                    "enum": ["cecil", "agnes", "daphne", "muriel"],
                    "description": "Summarization engine to use. Defaults to the configured engine.",
                },
                "target_language": {
                    "type": "string",
                    "description": (
                        "Desired output language using language codes (e.g., 'EN' for "
                        "English). If not specified, the document's original language "
                        "influences the output."
                    ),
                },
            },
        },
    ),
    ToolDescriptor(
        name=ToolName.FASTGPT.value,
        description=(
            "Answer a question with Kagi FastGPT. The answer is grounded in web search "
            "results and cites its references by number."
        ),
        input_schema=_QUERY_SCHEMA,
    ),
    ToolDescriptor(
        name=ToolName.ENRICH_WEB.value,
        description=(
            "Search Kagi's 'small web' index of non-commercial websites and personal "
            "blogs. Good for finding independent, discussion-style content."
        ),
        input_schema=_QUERY_SCHEMA,
    ),
    ToolDescriptor(
        name=ToolName.ENRICH_NEWS.value,
        description=(
            "Search Kagi's news enrichment index of non-mainstream news sources and "
            "interesting discussions."
        ),
        input_schema=_QUERY_SCHEMA,
    ),
)


class ToolRegistry(Mapping[str, ToolDescriptor]):
    """Read-only mapping from tool name to :class:`ToolDescriptor`.

    Usage::

        registry = ToolRegistry.from_flags(config.tools)
        registry.descriptors()                 # tools/list payload
        registry.validate("kagi_fastgpt", {})  # -> "'query' is a required property"
    """

    def __init__(self, descriptors: Iterable[ToolDescriptor]) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._validators: dict[str, Draft202012Validator] = {}
        for descriptor in descriptors:
            if descriptor.name in self._tools:
                msg = f"Duplicate tool name: {descriptor.name}"
                raise ValueError(msg)
            Draft202012Validator.check_schema(descriptor.input_schema)
            self._tools[descriptor.name] = descriptor
            self._validators[descriptor.name] = Draft202012Validator(descriptor.input_schema)

    @classmethod
    def from_flags(cls, flags: ToolFlags) -> ToolRegistry:
        """Registry of the tools *flags* leave enabled."""
        return cls(d for d in TOOL_DESCRIPTORS if flags.is_enabled(d.name))

    def __getitem__(self, name: str) -> ToolDescriptor:
        return self._tools[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def descriptors(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def validate(self, name: str, arguments: dict[str, Any]) -> str | None:
        """Check *arguments* against the tool's schema.

        Returns ``None`` when valid, otherwise a message describing the most
        relevant violated constraint.
        """
        error = best_match(self._validators[name].iter_errors(arguments))
        if error is None:
            return None
        path = ".".join(str(part) for part in error.absolute_path)
        return f"'{path}': {error.message}" if path else error.message
