"""LLM similarity scoring of candidate issues.

Candidates are scored in fixed-size batches, one generation call per batch,
with a pause between batches.  Replies are validated against
``SimilarityEntry``; anything the reply does not cover gets a low
placeholder score instead of an exception.
"""

from __future__ import annotations

import asyncio
import math
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jira_agent.dedup.result import (
    BatchOutcome,
    BatchStatus,
    CandidateIssue,
    SimilarityResult,
)
from jira_agent.llm_factory import TextGenerator, generate_text
from jira_agent.utils.llm_json import LLMPayloadError, parse_llm_payload
from jira_agent.utils.logger import log_debug, log_info, log_warning

PLACEHOLDER_SCORE = 0.1
UNMATCHED_REASON = "Analysis failed"
DEGRADED_REASON = "Unable to perform detailed analysis."
DEFAULT_REASON = "AI analysis completed"

SCORING_SYSTEM_PROMPT = (
    "You are an expert at analyzing Jira issue similarity. "
    "Provide accurate similarity scores and brief explanations."
)

SIMILARITY_RUBRIC = """Similarity guidelines:
- 0.9+: Nearly identical
- 0.7-0.89: Very similar, likely duplicate
- 0.5-0.69: Related but distinct
- 0.3-0.49: Some overlap
- 0.0-0.29: Different issues"""


class SimilarityEntry(BaseModel):
    """One element of the scoring reply."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    issue_index: int = Field(alias="issueIndex")
    similarity: Optional[float] = None
    reason: Optional[str] = None

    @field_validator("similarity", mode="before")
    @classmethod
    def coerce_similarity(cls, v):
        try:
            value = float(v)
        except (TypeError, ValueError):
            return None
        return None if math.isnan(value) else value

    @field_validator("reason", mode="before")
    @classmethod
    def coerce_reason(cls, v):
        if v is None:
            return None
        text = str(v).strip()
        return text or None


def parse_similarity_reply(reply: Optional[str]) -> Dict[int, SimilarityEntry]:
    """Decode a scoring reply into entries keyed by 1-based candidate index.

    Invalid entries are dropped; the first entry for an index wins.

    Raises:
        LLMPayloadError: If the reply is not a JSON list of entries (or an
            object wrapping exactly such a list).
    """
    payload = parse_llm_payload(reply)
    if isinstance(payload, dict):
        lists = [value for value in payload.values() if isinstance(value, list)]
        if len(lists) != 1:
            raise LLMPayloadError("Expected a list of similarity entries")
        payload = lists[0]
    if not isinstance(payload, list):
        raise LLMPayloadError(f"Expected list, got {type(payload).__name__}")

    entries: Dict[int, SimilarityEntry] = {}
    for item in payload:
        try:
            entry = SimilarityEntry.model_validate(item)
        except ValidationError:
            log_debug("Dropping invalid similarity entry", entry=item)
            continue
        entries.setdefault(entry.issue_index, entry)
    return entries


def build_batch_prompt(title: str, description: str, batch: List[CandidateIssue]) -> str:
    existing = "".join(
        f"\n{index}. Key: {issue.key}\n"
        f"   Title: {issue.summary}\n"
        f"   Description: {issue.description or 'No description'}\n"
        f"   Status: {issue.status}\n"
        for index, issue in enumerate(batch, start=1)
    )
    return (
        "Compare the new issue with each existing issue and provide similarity scores.\n\n"
        "NEW ISSUE:\n"
        f"Title: {title}\n"
        f"Description: {description}\n\n"
        "EXISTING ISSUES:\n"
        f"{existing}\n"
        "For each existing issue, return similarity analysis as JSON array:\n"
        "[\n"
        "  {\n"
        '    "issueIndex": 1,\n'
        '    "similarity": 0.0-1.0,\n'
        '    "reason": "brief explanation"\n'
        "  }\n"
        "]\n\n"
        f"{SIMILARITY_RUBRIC}"
    )


def degraded_result(candidate: CandidateIssue) -> SimilarityResult:
    return SimilarityResult.for_candidate(candidate, PLACEHOLDER_SCORE, DEGRADED_REASON)


BatchCall = Callable[[Callable[[], Awaitable[str]]], Awaitable[str]]


class SimilarityScorer:
    """Score candidates against a new issue in sequential batches.

    Args:
        generate: Text generation callable.
        batch_size: Candidates per generation call.
        batch_delay_seconds: Pause between consecutive batches.
        call_wrapper: Optional wrapper around each batch call (e.g. a
            retrying runner); receives a zero-argument coroutine factory.
        sleep: Awaitable sleep, replaceable in tests.
    """

    def __init__(
        self,
        generate: TextGenerator = generate_text,
        batch_size: int = 5,
        batch_delay_seconds: float = 0.5,
        call_wrapper: Optional[BatchCall] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.generate = generate
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.call_wrapper = call_wrapper
        self._sleep = sleep

    async def score(
        self, title: str, description: str, candidates: List[CandidateIssue]
    ) -> List[SimilarityResult]:
        """Score all candidates; positive scores only, highest first (stable)."""
        results: List[SimilarityResult] = []
        degraded_batches = 0

        for start in range(0, len(candidates), self.batch_size):
            batch = candidates[start:start + self.batch_size]
            outcome = await self.score_batch(title, description, batch)
            results.extend(outcome.results)
            if outcome.status is BatchStatus.DEGRADED:
                degraded_batches += 1

            if start + self.batch_size < len(candidates):
                await self._sleep(self.batch_delay_seconds)

        ranked = sorted(
            (r for r in results if r.similarity > 0),
            key=lambda r: r.similarity,
            reverse=True,
        )
        log_info(
            "Similarity scoring completed",
            candidates=len(candidates),
            scored=len(ranked),
            degraded_batches=degraded_batches,
        )
        return ranked

    async def _call(self, prompt: str) -> str:
        async def invoke() -> str:
            return await self.generate(
                SCORING_SYSTEM_PROMPT, prompt, temperature=0.2, max_tokens=600
            )

        if self.call_wrapper is None:
            return await invoke()
        return await self.call_wrapper(invoke)

    async def score_batch(
        self, title: str, description: str, batch: List[CandidateIssue]
    ) -> BatchOutcome:
        """Score one batch. Never raises."""
        prompt = build_batch_prompt(title, description, batch)

        try:
            reply = await self._call(prompt)
        except Exception as e:
            log_warning("Batch analysis failed", error=str(e), batch=[c.key for c in batch])
            return BatchOutcome(BatchStatus.DEGRADED, [degraded_result(c) for c in batch])

        try:
            entries = parse_similarity_reply(reply)
        except LLMPayloadError as e:
            log_warning(
                "Batch reply not decodable",
                error=str(e),
                reply_preview=(reply or "")[:200],
            )
            return BatchOutcome(BatchStatus.DEGRADED, [degraded_result(c) for c in batch])

        results = []
        for index, candidate in enumerate(batch, start=1):
            entry = entries.get(index)
            if entry is None or entry.similarity is None:
                results.append(
                    SimilarityResult.for_candidate(candidate, PLACEHOLDER_SCORE, UNMATCHED_REASON)
                )
                continue
            results.append(
                SimilarityResult.for_candidate(
                    candidate, entry.similarity, entry.reason or DEFAULT_REASON
                )
            )
        return BatchOutcome(BatchStatus.SCORED, results)
