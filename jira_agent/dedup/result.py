"""Data classes for duplicate detection results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from jira_agent.gateway.utils import extract_text_from_description, named_field

UNKNOWN_LABEL = "Unknown"


def clamp_similarity(value: Optional[float]) -> float:
    """Clamp a score to [0, 1]; missing or NaN scores become 0."""
    if value is None or math.isnan(value):
        return 0.0
    return min(max(float(value), 0.0), 1.0)


@dataclass(frozen=True)
class CandidateIssue:
    """Read-only snapshot of an existing tracker issue."""

    key: str
    summary: str
    description: str = ""
    status: str = UNKNOWN_LABEL
    priority: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Optional[CandidateIssue]:
        """Build a candidate from a raw search record; None when it has no key."""
        if not isinstance(record, dict) or not record.get("key"):
            return None
        fields = record.get("fields")
        if not isinstance(fields, dict):
            fields = record
        return cls(
            key=str(record["key"]),
            summary=str(fields.get("summary") or ""),
            description=extract_text_from_description(fields.get("description")),
            status=named_field(fields.get("status")) or UNKNOWN_LABEL,
            priority=named_field(fields.get("priority")),
        )


@dataclass(frozen=True)
class SimilarityResult:
    """A candidate together with its similarity to the new issue.

    ``similarity`` is always within [0, 1].
    """

    key: str
    summary: str
    description: str
    status: str
    priority: str
    similarity: float
    reason: str

    def __post_init__(self):
        object.__setattr__(self, "similarity", clamp_similarity(self.similarity))

    @classmethod
    def for_candidate(cls, candidate: CandidateIssue, similarity: float, reason: str) -> SimilarityResult:
        return cls(
            key=candidate.key,
            summary=candidate.summary,
            description=candidate.description,
            status=candidate.status,
            priority=candidate.priority or UNKNOWN_LABEL,
            similarity=similarity,
            reason=reason,
        )


@dataclass
class DuplicateAnalysis:
    """Verdict of one duplicate check.

    Attributes:
        has_potential_duplicates: True iff ``similar_issues`` is non-empty.
        similar_issues: Significant matches, highest similarity first.
        recommendations: Guidance lines for the user, in display order.
    """

    has_potential_duplicates: bool
    similar_issues: List[SimilarityResult] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


class SearchStatus(Enum):
    """How the candidate search ended."""

    PRIMARY = "primary"  # Keyword query succeeded
    FALLBACK = "fallback"  # Primary failed, free-text query succeeded
    FAILED = "failed"  # Both queries failed


@dataclass
class SearchOutcome:
    """Candidates plus the path that produced them."""

    status: SearchStatus
    candidates: List[CandidateIssue] = field(default_factory=list)
    query: Optional[str] = None


class BatchStatus(Enum):
    """How a scoring batch ended."""

    SCORED = "scored"  # Reply decoded; unmatched entries carry placeholders
    DEGRADED = "degraded"  # Call failed or reply undecodable; all placeholders


@dataclass
class BatchOutcome:
    """Scores for one batch of candidates, in candidate order."""

    status: BatchStatus
    results: List[SimilarityResult] = field(default_factory=list)
