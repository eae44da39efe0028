"""Unit tests for recommendation banding."""

from jira_agent.dedup.recommendations import (
    HIGH_SIMILARITY_BLOCK,
    NO_SIGNIFICANT_MATCHES,
    RELATED_ISSUES_BLOCK,
    REVIEW_PROMPT,
    generate_recommendations,
)
from jira_agent.dedup.result import CandidateIssue, SimilarityResult


def match(similarity):
    return SimilarityResult.for_candidate(CandidateIssue("PROJ-1", "s"), similarity, "r")


def test_no_matches():
    assert generate_recommendations([]) == [NO_SIGNIFICANT_MATCHES]


def test_high_only():
    assert generate_recommendations([match(0.95)]) == HIGH_SIMILARITY_BLOCK + [REVIEW_PROMPT]


def test_related_only():
    assert generate_recommendations([match(0.7)]) == RELATED_ISSUES_BLOCK + [REVIEW_PROMPT]


def test_high_block_comes_first():
    recommendations = generate_recommendations([match(0.65), match(0.85)])
    assert recommendations.index(HIGH_SIMILARITY_BLOCK[0]) < recommendations.index(RELATED_ISSUES_BLOCK[0])
    assert recommendations[-1] == REVIEW_PROMPT


def test_high_threshold_is_strict():
    assert generate_recommendations([match(0.8)]) == RELATED_ISSUES_BLOCK + [REVIEW_PROMPT]


def test_block_headers():
    assert HIGH_SIMILARITY_BLOCK[0] == "⚠️  High similarity detected! Consider these actions:"
    assert RELATED_ISSUES_BLOCK[0] == "💡 Related issues found. Consider:"
