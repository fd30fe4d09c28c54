"""Render upstream results as text content for the host.

The layouts are stable: every search-like listing is a header followed by
numbered entries of title, URL, published date and snippet.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from kagimcp.api.models import FastGPTAnswer, SearchResponse

_SEPARATOR = "-----"


def format_results(
    query: str, response: SearchResponse, *, label: str = "search", start: int = 1
) -> str:
    """Format search or enrichment results, numbering the first one *start*.

    Example::

        -----
        Results for search query "rust":
        -----
        1: The Rust Programming Language
        https://www.rust-lang.org/
        Published Date: Not Available
        A language empowering everyone...
    """
    lines = [_SEPARATOR, f'Results for {label} query "{query}":', _SEPARATOR]
    results = response.results
    if not results:
        lines.append("No results found.")

    for number, result in enumerate(results, start=start):
        lines.append(f"{number}: {result.title}")
        lines.append(result.url)
        lines.append(f"Published Date: {result.published or 'Not Available'}")
        lines.append(result.snippet or "")
        lines.append("")

    related = response.related_searches
    if related:
        lines.append("Related searches: " + ", ".join(related))
    return "\n".join(lines).rstrip() + "\n"


def format_searches(searches: Sequence[tuple[str, SearchResponse]]) -> str:
    """Format several searches in order, numbered continuously across them."""
    blocks: list[str] = []
    start = 1
    for query, response in searches:
        blocks.append(format_results(query, response, start=start))
        start += len(response.results)
    return "\n".join(blocks)


def structured_results(query: str, response: SearchResponse) -> dict[str, Any]:
    """Machine-readable companion to :func:`format_results`."""
    return {
        "query": query,
        "results": [
            item.model_dump(include={"rank", "url", "title", "snippet", "published"})
            for item in response.results
        ],
        "related_searches": response.related_searches,
    }


def format_answer(answer: FastGPTAnswer) -> str:
    """FastGPT output followed by its numbered references."""
    if not answer.references:
        return answer.output

    lines = [answer.output.rstrip(), "", "References:"]
    for number, ref in enumerate(answer.references, start=1):
        lines.append(f"[{number}] {ref.title}")
        lines.append(ref.url)
        if ref.snippet:
            lines.append(ref.snippet)
    return "\n".join(lines)
