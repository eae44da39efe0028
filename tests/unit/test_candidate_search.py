"""Unit tests for candidate search and its fallback path."""

from unittest.mock import AsyncMock

import pytest

from jira_agent.dedup.result import SearchStatus
from jira_agent.dedup.search import (
    CandidateSearch,
    build_fallback_query,
    build_keyword_jql,
)


@pytest.fixture
def keyword_generator():
    return AsyncMock(return_value='["login", "sso"]')


class TestQueryBuilders:
    """JQL and free-text queries."""

    def test_keyword_jql(self):
        assert build_keyword_jql("PROJ", ["login", "sso"]) == (
            'project = "PROJ" AND (text ~ "login" OR text ~ "sso")'
        )

    def test_keyword_jql_escapes_quotes(self):
        jql = build_keyword_jql("PROJ", ['say "hi"'])
        assert 'text ~ "say \\"hi\\""' in jql

    def test_fallback_uses_first_three_title_words(self):
        assert build_fallback_query("PROJ", "Login fails on mobile app") == "project:PROJ Login fails on"

    def test_fallback_short_title(self):
        assert build_fallback_query("PROJ", "Crash") == "project:PROJ Crash"


class TestCandidateSearch:
    """Primary, fallback and failed outcomes."""

    @pytest.mark.asyncio
    async def test_primary_success(self, search_backend, keyword_generator):
        search = CandidateSearch(search_backend, generate=keyword_generator, max_results=20)

        outcome = await search.search("PROJ", "Login fails", "SSO")

        assert outcome.status is SearchStatus.PRIMARY
        assert [c.key for c in outcome.candidates] == ["PROJ-1", "PROJ-2", "PROJ-3"]
        assert outcome.query == 'project = "PROJ" AND (text ~ "login" OR text ~ "sso")'
        args, kwargs = search_backend.search.call_args
        assert args[0] == outcome.query
        assert kwargs["max_results"] == 20
        assert list(kwargs["fields"]) == ["summary", "description", "status", "priority", "key"]
        search_backend.search_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_candidate_fields(self, search_backend, keyword_generator):
        outcome = await CandidateSearch(search_backend, generate=keyword_generator).search(
            "PROJ", "Login fails", ""
        )

        second, third = outcome.candidates[1], outcome.candidates[2]
        assert second.status == "In Progress"
        assert second.priority == "Medium"
        assert third.description == ""
        assert third.priority is None

    @pytest.mark.asyncio
    async def test_primary_empty_is_not_a_failure(self, search_backend, keyword_generator):
        search_backend.search.return_value = {"issues": []}

        outcome = await CandidateSearch(search_backend, generate=keyword_generator).search(
            "PROJ", "Login fails", ""
        )

        assert outcome.status is SearchStatus.PRIMARY
        assert outcome.candidates == []
        search_backend.search_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_fallback_when_primary_fails(self, search_backend, keyword_generator, record_factory):
        search_backend.search.return_value = None
        search_backend.search_text.return_value = {"issues": [record_factory("PROJ-9", "Login fails")]}

        outcome = await CandidateSearch(search_backend, generate=keyword_generator).search(
            "PROJ", "Login fails on mobile app", ""
        )

        assert outcome.status is SearchStatus.FALLBACK
        assert [c.key for c in outcome.candidates] == ["PROJ-9"]
        search_backend.search_text.assert_awaited_once_with("project:PROJ Login fails on")

    @pytest.mark.asyncio
    async def test_fallback_when_primary_raises(self, search_backend, keyword_generator):
        search_backend.search.side_effect = RuntimeError("boom")

        outcome = await CandidateSearch(search_backend, generate=keyword_generator).search(
            "PROJ", "Login fails", ""
        )

        assert outcome.status is SearchStatus.FALLBACK
        assert outcome.candidates == []

    @pytest.mark.asyncio
    async def test_both_paths_fail(self, search_backend, keyword_generator):
        search_backend.search.return_value = None
        search_backend.search_text.side_effect = RuntimeError("gateway down")

        outcome = await CandidateSearch(search_backend, generate=keyword_generator).search(
            "PROJ", "Login fails", ""
        )

        assert outcome.status is SearchStatus.FAILED
        assert outcome.candidates == []

    @pytest.mark.asyncio
    async def test_records_without_key_are_skipped(self, search_backend, keyword_generator, record_factory):
        search_backend.search.return_value = {
            "issues": [{"fields": {"summary": "orphan"}}, record_factory("PROJ-5", "Kept")]
        }

        outcome = await CandidateSearch(search_backend, generate=keyword_generator).search(
            "PROJ", "x", ""
        )

        assert [c.key for c in outcome.candidates] == ["PROJ-5"]

    @pytest.mark.asyncio
    async def test_keyword_failure_still_searches(self, search_backend):
        generate = AsyncMock(side_effect=RuntimeError("service down"))

        outcome = await CandidateSearch(search_backend, generate=generate).search(
            "PROJ", "Login fails!!!", ""
        )

        assert outcome.status is SearchStatus.PRIMARY
        assert outcome.query == 'project = "PROJ" AND (text ~ "login" OR text ~ "fails")'
