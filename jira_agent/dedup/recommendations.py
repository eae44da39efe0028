"""Guidance lines shown next to a duplicate verdict."""

from __future__ import annotations

from typing import List

from jira_agent.dedup.result import SimilarityResult

NO_CANDIDATES = "✅ No similar issues found. Safe to proceed with creation."
NO_SIGNIFICANT_MATCHES = "✅ No similar issues found. Safe to proceed."
CHECK_UNAVAILABLE = "⚠️ Unable to check for duplicates. Proceed with caution."

HIGH_SIMILARITY_BLOCK = [
    "⚠️  High similarity detected! Consider these actions:",
    "   • Check if the existing issue can be updated instead",
    "   • Add a comment to the existing issue",
    "   • Create a subtask if this is a specific aspect",
]

RELATED_ISSUES_BLOCK = [
    "💡 Related issues found. Consider:",
    "   • Linking issues if they are related",
    "   • Adding references in the description",
    "   • Ensuring the new issue adds unique value",
]

REVIEW_PROMPT = "📋 Review the similar issues below before proceeding."


def generate_recommendations(
    matches: List[SimilarityResult],
    significant_threshold: float = 0.6,
    high_threshold: float = 0.8,
) -> List[str]:
    """Banded guidance: high (> high_threshold) first, then related."""
    if not matches:
        return [NO_SIGNIFICANT_MATCHES]

    recommendations: List[str] = []
    high = [m for m in matches if m.similarity > high_threshold]
    medium = [m for m in matches if significant_threshold < m.similarity <= high_threshold]

    if high:
        recommendations.extend(HIGH_SIMILARITY_BLOCK)
    if medium:
        recommendations.extend(RELATED_ISSUES_BLOCK)

    recommendations.append(REVIEW_PROMPT)
    return recommendations
