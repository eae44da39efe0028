"""Candidate search against the tracker.

Primary path: keyword JQL scoped to the project.  Fallback path: the first
three words of the title as a free-text query.  Every failure degrades to
the next path, and finally to an empty ``SearchOutcome``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from jira_agent.dedup.keywords import extract_keywords
from jira_agent.dedup.result import CandidateIssue, SearchOutcome, SearchStatus
from jira_agent.gateway.client import SEARCH_FIELDS
from jira_agent.llm_factory import TextGenerator, generate_text
from jira_agent.utils.logger import log_debug, log_info, log_warning


class IssueSearchBackend(Protocol):
    """The two search dialects offered by the gateway."""

    async def search(
        self,
        jql: str,
        *,
        fields: Sequence[str] = ...,
        max_results: Optional[int] = ...,
    ) -> Optional[Dict[str, Any]]:
        ...

    async def search_text(self, query: str) -> Optional[Dict[str, Any]]:
        ...


def _quote(term: str) -> str:
    return '"' + term.replace("\\", "\\\\").replace('"', '\\"') + '"'


def build_keyword_jql(project_key: str, keywords: List[str]) -> str:
    """``project = "KEY" AND (text ~ "a" OR text ~ "b")``."""
    clauses = " OR ".join(f"text ~ {_quote(k)}" for k in keywords)
    return f"project = {_quote(project_key)} AND ({clauses})"


def build_fallback_query(project_key: str, title: str) -> str:
    title_words = " ".join((title or "").split()[:3])
    return f"project:{project_key} {title_words}".strip()


def _parse_candidates(data: Optional[Dict[str, Any]]) -> List[CandidateIssue]:
    issues = (data or {}).get("issues") or []
    candidates = []
    for record in issues:
        candidate = CandidateIssue.from_record(record)
        if candidate is None:
            log_warning("Skipping search record without key")
            continue
        candidates.append(candidate)
    return candidates


class CandidateSearch:
    """Find existing issues that might duplicate a new one."""

    def __init__(
        self,
        backend: IssueSearchBackend,
        generate: TextGenerator = generate_text,
        max_results: int = 20,
        max_keywords: int = 5,
    ):
        self.backend = backend
        self.generate = generate
        self.max_results = max_results
        self.max_keywords = max_keywords

    async def search(self, project_key: str, title: str, description: str) -> SearchOutcome:
        """Run the primary query, falling back on failure. Never raises."""
        try:
            keywords = await extract_keywords(
                title, description, generate=self.generate, max_keywords=self.max_keywords
            )
            jql = build_keyword_jql(project_key, keywords)
            log_debug("Candidate JQL built", jql=jql)

            data = await self.backend.search(
                jql, fields=SEARCH_FIELDS, max_results=self.max_results
            )
            if data is None:
                log_warning("Primary candidate search failed, trying fallback", project=project_key)
                return await self.fallback_search(project_key, title)

            candidates = _parse_candidates(data)
            log_info("Candidate search completed", project=project_key, candidates=len(candidates))
            return SearchOutcome(SearchStatus.PRIMARY, candidates, jql)

        except Exception as e:
            log_warning("Candidate search raised, trying fallback", error=str(e))
            return await self.fallback_search(project_key, title)

    async def fallback_search(self, project_key: str, title: str) -> SearchOutcome:
        """Free-text search on the first title words. Never raises."""
        query = build_fallback_query(project_key, title)
        try:
            data = await self.backend.search_text(query)
            if data is None:
                log_warning("Fallback candidate search failed", query=query)
                return SearchOutcome(SearchStatus.FAILED, [], query)
            candidates = _parse_candidates(data)
        except Exception as e:
            log_warning("Fallback candidate search raised", error=str(e), query=query)
            return SearchOutcome(SearchStatus.FAILED, [], query)

        log_info("Fallback candidate search completed", candidates=len(candidates))
        return SearchOutcome(SearchStatus.FALLBACK, candidates, query)
