"""Tests for typed tool arguments."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kagimcp.tools.arguments import SearchArgs, SummarizerArgs
from kagimcp.utils.validation import first_error


class TestSearchArgs:
    def test_query_runs_first(self) -> None:
        args = SearchArgs(query="a", queries=["b", "c"])
        assert args.all_queries == ["a", "b", "c"]

    def test_query_only(self) -> None:
        assert SearchArgs(query="a").all_queries == ["a"]

    def test_queries_only(self) -> None:
        assert SearchArgs(queries=["b"]).all_queries == ["b"]

    def test_neither_rejected(self) -> None:
        with pytest.raises(ValidationError) as info:
            SearchArgs(limit=5)
        assert first_error(info.value) == "one of 'query' or 'queries' is required"

    def test_empty_queries_rejected(self) -> None:
        with pytest.raises(ValidationError) as info:
            SearchArgs(queries=[])
        assert first_error(info.value).startswith("'queries':")


class TestSummarizerArgs:
    def test_both_targets_rejected(self) -> None:
        with pytest.raises(ValidationError) as info:
            SummarizerArgs(url="https://example.com", text="body")
        assert first_error(info.value) == "provide only one of 'url' or 'text', not both"
