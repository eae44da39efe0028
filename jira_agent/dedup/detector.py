"""Orchestrator for the duplicate check.

``DuplicateDetector`` runs candidate search, batched LLM scoring and
thresholding, then synthesizes recommendations.  It never raises: any
unexpected failure turns into a cautious "proceed" verdict.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol

from jira_agent.dedup.recommendations import (
    CHECK_UNAVAILABLE,
    NO_CANDIDATES,
    generate_recommendations,
)
from jira_agent.dedup.result import DuplicateAnalysis, SearchOutcome
from jira_agent.dedup.scorer import SimilarityScorer
from jira_agent.dedup.search import CandidateSearch
from jira_agent.interaction import UserChannel
from jira_agent.llm_factory import TextGenerator, generate_text
from jira_agent.utils.logger import (
    log_agent_progress,
    log_duplicate_detection,
    log_error,
    log_info,
)
from jira_agent.utils.retry import OperationRunner, RetryController

SCORING_CONTEXT = "similarity-analysis"
DETECTION_CONTEXT = "duplicate-detection"


class CandidateSource(Protocol):
    async def search(self, project_key: str, title: str, description: str) -> SearchOutcome:
        ...


class DuplicateDetector:
    """Decide whether a new issue likely duplicates existing ones.

    Args:
        search: Candidate source (usually ``CandidateSearch``).
        scorer: Batch similarity scorer.
        significant_threshold: Scores strictly above are reported.
        high_threshold: Scores strictly above get the high-similarity guidance.
        channel: Optional user channel for progress messages.
        reporter: Optional retry controller used to display unexpected failures.

    Usage::

        detector = DuplicateDetector(CandidateSearch(client), SimilarityScorer())
        analysis = await detector.check_for_duplicates("PROJ", title, description)
        if analysis.has_potential_duplicates:
            ...
    """

    def __init__(
        self,
        search: CandidateSource,
        scorer: SimilarityScorer,
        significant_threshold: float = 0.6,
        high_threshold: float = 0.8,
        channel: Optional[UserChannel] = None,
        reporter: Optional[RetryController] = None,
    ):
        self.search = search
        self.scorer = scorer
        self.significant_threshold = significant_threshold
        self.high_threshold = high_threshold
        self.channel = channel
        self.reporter = reporter

    def _show(self, message: str, level: str = "info") -> None:
        if self.channel is not None:
            self.channel.show(message, level)

    async def check_for_duplicates(
        self, project_key: str, title: str, description: str
    ) -> DuplicateAnalysis:
        try:
            self._show("🔍 Checking for similar issues...")
            outcome = await self.search.search(project_key, title, description)
            log_agent_progress(
                "Candidate search finished",
                status=outcome.status.value,
                query=outcome.query,
                candidates=len(outcome.candidates),
            )

            if not outcome.candidates:
                return DuplicateAnalysis(
                    has_potential_duplicates=False,
                    similar_issues=[],
                    recommendations=[NO_CANDIDATES],
                )

            self._show(f"📊 Analyzing {len(outcome.candidates)} potential matches...")
            scored = await self.scorer.score(title, description, outcome.candidates)

            significant = [r for r in scored if r.similarity > self.significant_threshold]
            for match in significant:
                log_duplicate_detection(match.similarity, match.key, reason=match.reason)

            log_info(
                "Duplicate check completed",
                project=project_key,
                candidates=len(outcome.candidates),
                significant=len(significant),
            )
            return DuplicateAnalysis(
                has_potential_duplicates=bool(significant),
                similar_issues=significant,
                recommendations=generate_recommendations(
                    significant, self.significant_threshold, self.high_threshold
                ),
            )

        except Exception as e:
            log_error("Duplicate detection failed", error=str(e), error_type=type(e).__name__)
            if self.reporter is not None:
                self.reporter.report(e, DETECTION_CONTEXT)
            return DuplicateAnalysis(
                has_potential_duplicates=False,
                similar_issues=[],
                recommendations=[CHECK_UNAVAILABLE],
            )


def retrying_call(runner: OperationRunner, context: str) -> Callable[[Callable[[], Awaitable[Any]]], Awaitable[Any]]:
    """Wrap calls in ``runner`` and clear the context budget after a success."""

    async def wrapper(invoke: Callable[[], Awaitable[Any]]) -> Any:
        result = await runner.run(invoke, context)
        runner.controller.reset_retry_count(context)
        return result

    return wrapper


def build_detector(
    backend,
    config,
    runner: Optional[OperationRunner] = None,
    channel: Optional[UserChannel] = None,
    generate: TextGenerator = generate_text,
) -> DuplicateDetector:
    """Wire search, scorer and thresholds from configuration."""
    search = CandidateSearch(
        backend,
        generate=generate,
        max_results=config.dedup_search_max_results,
        max_keywords=config.dedup_max_keywords,
    )
    scorer = SimilarityScorer(
        generate=generate,
        batch_size=config.dedup_batch_size,
        batch_delay_seconds=config.dedup_batch_delay_seconds,
        call_wrapper=retrying_call(runner, SCORING_CONTEXT) if runner else None,
    )
    return DuplicateDetector(
        search,
        scorer,
        significant_threshold=config.dedup_similarity_threshold,
        high_threshold=config.dedup_high_similarity_threshold,
        channel=channel,
        reporter=runner.controller if runner else None,
    )
