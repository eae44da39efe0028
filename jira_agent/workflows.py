"""User-facing workflows: issue creation with duplicate check, and search.

These are the callers of the duplicate detector and of the retrying
operation runner.  A failed workflow is reported to the user and ends
there; it never takes the session down.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from jira_agent.dedup.detector import DuplicateDetector
from jira_agent.dedup.presentation import present_analysis
from jira_agent.dedup.result import CandidateIssue
from jira_agent.gateway.client import AsyncGatewayClient, CreateIssueResult
from jira_agent.interaction import UserChannel
from jira_agent.utils.errors import validation_error
from jira_agent.utils.logger import log_agent_progress, log_info
from jira_agent.utils.retry import OperationRunner

CREATE_CONTEXT = "create-issue"
CREATE_FLOW_CONTEXT = "create-issue-flow"

PRIORITIES = ["Highest", "High", "Medium", "Low", "Lowest"]


class GatewayRequestError(Exception):
    """A gateway call answered with a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class IssueDetails:
    """Fields collected for a new issue."""

    project_key: str
    issue_type: str
    title: str
    description: str = ""
    priority: str = "Medium"
    assignee: Optional[str] = None

    def validate(self) -> None:
        if not self.project_key.strip():
            raise validation_error("Project key is required")
        if not self.title.strip():
            raise validation_error("Title is required")
        if self.priority not in PRIORITIES:
            raise validation_error(f"Priority must be one of: {', '.join(PRIORITIES)}")


class IssueCreationFlow:
    """Duplicate check, user decision, then creation with retries."""

    def __init__(
        self,
        client: AsyncGatewayClient,
        detector: DuplicateDetector,
        runner: OperationRunner,
        channel: UserChannel,
    ):
        self.client = client
        self.detector = detector
        self.runner = runner
        self.channel = channel

    async def _create(self, details: IssueDetails) -> CreateIssueResult:
        result = await self.client.create_issue(
            project_key=details.project_key,
            issue_type=details.issue_type,
            summary=details.title,
            description=details.description,
            priority=details.priority,
            assignee=details.assignee,
        )
        if not result.success:
            prefix = f"HTTP {result.status_code}: " if result.status_code else ""
            raise GatewayRequestError(f"{prefix}{result.error}", result.status_code)
        return result

    async def run(self, details: IssueDetails) -> Optional[CreateIssueResult]:
        """Return the creation result, or None when cancelled or failed."""
        try:
            details.validate()

            self.channel.show("🔍 Checking for potential duplicates...", "warning")
            analysis = await self.detector.check_for_duplicates(
                details.project_key, details.title, details.description
            )

            if not await present_analysis(analysis, self.channel):
                self.channel.show("Issue creation cancelled based on duplicate analysis.")
                log_info("Issue creation cancelled", project=details.project_key)
                return None

            result = await self.runner.run(lambda: self._create(details), CREATE_CONTEXT)
            self.runner.controller.reset_retry_count(CREATE_CONTEXT)

            self.channel.show(f"Issue created: {result.key or '(key not returned)'}", "success")
            log_agent_progress("Issue created", issue_key=result.key, project=details.project_key)
            return result

        except Exception as e:
            self.runner.controller.report(e, CREATE_FLOW_CONTEXT)
            return None


async def search_issues(
    client: AsyncGatewayClient, query: str, channel: UserChannel
) -> List[CandidateIssue]:
    """Free-text search; results are listed on the channel."""
    channel.show("🔍 Searching...", "muted")
    data = await client.search_text(query)
    if data is None:
        channel.show("Search failed. Check the gateway connection.", "error")
        return []

    issues = []
    for record in data.get("issues") or []:
        issue = CandidateIssue.from_record(record)
        if issue is not None:
            issues.append(issue)

    if not issues:
        channel.show("No issues found matching your query.", "warning")
        return []

    channel.show(f"📋 Found {len(issues)} issues:", "success")
    for index, issue in enumerate(issues, start=1):
        channel.show(f"  {index}. [{issue.key}] {issue.summary}", "muted")
        channel.show(f"     Status: {issue.status} | Priority: {issue.priority or 'None'}", "muted")
    return issues
