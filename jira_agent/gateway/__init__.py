"""Async access to the Jira automation gateway."""

from jira_agent.gateway.client import AsyncGatewayClient, CreateIssueResult

__all__ = ["AsyncGatewayClient", "CreateIssueResult"]
