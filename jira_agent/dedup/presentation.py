"""Render a duplicate verdict and collect the user's decision."""

from __future__ import annotations

from enum import Enum
from typing import List

from jira_agent.dedup.result import DuplicateAnalysis, SimilarityResult
from jira_agent.interaction import UserChannel
from jira_agent.utils.logger import log_info


class DuplicateDecision(Enum):
    """What the user wants to do about potential duplicates."""

    PROCEED = "proceed"
    REVIEW = "review"
    CANCEL = "cancel"
    RESTART = "restart"


DECISION_OPTIONS = [
    (DuplicateDecision.PROCEED, "Proceed with creation anyway"),
    (DuplicateDecision.REVIEW, "Review similar issues in detail"),
    (DuplicateDecision.CANCEL, "Cancel and investigate manually"),
    (DuplicateDecision.RESTART, "Modify the issue to be more specific"),
]


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def format_match(index: int, issue: SimilarityResult) -> List[str]:
    return [
        f"{index}. [{issue.key}] {_truncate(issue.summary, 50)}",
        f"   Status: {issue.status} | Priority: {issue.priority} | Similarity: {issue.similarity * 100:.1f}%",
        f"   Reason: {issue.reason}",
    ]


async def show_detailed_review(similar_issues: List[SimilarityResult], channel: UserChannel) -> None:
    channel.show("📄 Detailed Issue Review:", "warning")
    total = len(similar_issues)
    for position, issue in enumerate(similar_issues, start=1):
        channel.show(f"[{position}/{total}] Issue: {issue.key}")
        channel.show(f"📝 Title: {issue.summary}", "muted")
        channel.show(f"📊 Status: {issue.status}", "muted")
        channel.show(f"⚡ Priority: {issue.priority}", "muted")
        channel.show(f"🎯 Similarity: {issue.similarity * 100:.1f}%", "muted")
        channel.show(f"💭 Reason: {issue.reason}", "muted")
        if issue.description and issue.description.strip():
            channel.show(f"📄 Description: {_truncate(issue.description, 200)}", "muted")
        if position < total:
            await channel.pause("Press Enter to continue to next issue...")
    channel.show("Review completed!", "success")


async def choose_decision(analysis: DuplicateAnalysis, channel: UserChannel) -> DuplicateDecision:
    """Show matches and recommendations, then ask which action to take."""
    channel.show("Potential duplicate issues detected!", "warning")

    channel.show("📋 Recommendations:")
    for line in analysis.recommendations:
        channel.show(line, "muted")

    if analysis.similar_issues:
        channel.show("🔍 Similar Issues Found:")
        for index, issue in enumerate(analysis.similar_issues, start=1):
            for line in format_match(index, issue):
                channel.show(line, "muted")

    choice = await channel.choose(
        "🤔 What would you like to do?", [label for _, label in DECISION_OPTIONS]
    )
    if 0 <= choice < len(DECISION_OPTIONS):
        return DECISION_OPTIONS[choice][0]
    return DuplicateDecision.CANCEL


async def present_analysis(analysis: DuplicateAnalysis, channel: UserChannel) -> bool:
    """Return True when issue creation should go ahead."""
    if not analysis.has_potential_duplicates:
        channel.show("No potential duplicates found. Safe to proceed with creation.", "success")
        return True

    decision = await choose_decision(analysis, channel)
    log_info("Duplicate decision taken", decision=decision.value)

    if decision is DuplicateDecision.PROCEED:
        channel.show("Proceeding with issue creation...")
        return True
    if decision is DuplicateDecision.REVIEW:
        await show_detailed_review(analysis.similar_issues, channel)
        return await channel.confirm("Proceed with creation after review?")
    if decision is DuplicateDecision.RESTART:
        channel.show("Please restart the creation process with more specific details.")
        return False

    channel.show("Issue creation cancelled for manual investigation.")
    return False
