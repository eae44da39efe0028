"""Duplicate detection for new Jira issues.

Search -> batched LLM scoring -> thresholding -> recommendations.
"""

from jira_agent.dedup.result import (
    CandidateIssue,
    DuplicateAnalysis,
    SimilarityResult,
)
from jira_agent.dedup.detector import DuplicateDetector, build_detector
from jira_agent.dedup.presentation import DuplicateDecision, present_analysis

__all__ = [
    "CandidateIssue",
    "DuplicateAnalysis",
    "SimilarityResult",
    "DuplicateDetector",
    "build_detector",
    "DuplicateDecision",
    "present_analysis",
]
