"""Async HTTP client for the Jira automation gateway using httpx.

The gateway fronts Jira with a small REST surface.  Search accepts two
dialects: a structured JQL query (``{"jql": ..., "maxResults": ..., "fields": [...]}``)
and a simplified free-text query (``{"query": ...}``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx

from jira_agent.config import get_config
from jira_agent.utils.logger import log_api_response, log_error

SEARCH_FIELDS: List[str] = ["summary", "description", "status", "priority", "key"]
USER_AGENT = "Jira-AI-Agent/1.0.0"


@dataclass
class CreateIssueResult:
    """Outcome of a create-issue call."""

    success: bool
    key: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class AsyncGatewayClient:
    """Async gateway client with connection pooling."""

    def __init__(self, config=None):
        """Initialize async client with configuration."""
        self.config = config or get_config()
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        """Context manager entry - creates HTTP client."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.gateway_timeout),
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10
            )
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.gateway_api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _url(self, path: str) -> str:
        return f"{self.config.gateway_url}{path}"

    def is_configured(self) -> bool:
        """Check if the gateway is properly configured."""
        return all([
            self.config.gateway_url,
            self.config.gateway_api_key,
        ])

    def _ready(self) -> bool:
        if not self.is_configured():
            log_error("Gateway not configured")
            return False
        if not self._client:
            log_error("AsyncGatewayClient not initialized - use 'async with' context")
            return False
        return True

    async def _post_search(self, body: Dict[str, Any], operation: str) -> Optional[Dict[str, Any]]:
        if not self._ready():
            return None

        try:
            resp = await self._client.post(
                self._url("/api/jira/search"),
                headers=self._headers(),
                json=body,
            )
            resp.raise_for_status()
            log_api_response(operation, resp.status_code)
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log_error(f"{operation} failed", error=str(e), request=body)
            return None

        if not isinstance(data, dict):
            log_error(f"{operation} returned an unexpected body", body_type=type(data).__name__)
            return None
        return data

    async def search(
        self,
        jql: str,
        *,
        fields: Sequence[str] = tuple(SEARCH_FIELDS),
        max_results: Optional[int] = None,
    ) -> Optional[Dict[str, Any]]:
        """Structured search.

        Args:
            jql: JQL query string
            fields: Field names to return
            max_results: Maximum results (defaults to config)

        Returns:
            Search results or None on error
        """
        if max_results is None:
            max_results = self.config.dedup_search_max_results
        return await self._post_search(
            {"jql": jql, "maxResults": max_results, "fields": list(fields)},
            "Gateway JQL search",
        )

    async def search_text(self, query: str) -> Optional[Dict[str, Any]]:
        """Simplified free-text search.

        Returns:
            Search results or None on error
        """
        return await self._post_search({"query": query}, "Gateway text search")

    async def create_issue(
        self,
        project_key: str,
        issue_type: str,
        summary: str,
        description: str,
        priority: str,
        assignee: Optional[str] = None,
    ) -> CreateIssueResult:
        """Create a Jira issue through the gateway.

        Failures are returned, not raised.
        """
        if not self._ready():
            return CreateIssueResult(success=False, error="Gateway not configured")

        body = {
            "projectKey": project_key,
            "issueType": issue_type,
            "summary": summary,
            "description": description,
            "priority": priority,
            "assignee": assignee,
        }

        try:
            resp = await self._client.post(
                self._url("/api/jira/create-issue"),
                headers=self._headers(),
                json=body,
            )
        except httpx.HTTPError as e:
            log_error("Failed to create Jira issue", error=f"{type(e).__name__}: {e}")
            return CreateIssueResult(success=False, error=f"{type(e).__name__}: {e}" if str(e) else type(e).__name__)

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"result": data}

        if resp.is_success:
            log_api_response("Jira issue creation", resp.status_code, data)
            key = data.get("key")
            if not key and isinstance(data.get("data"), dict):
                key = data["data"].get("key")
            return CreateIssueResult(success=True, key=key, data=data, status_code=resp.status_code)

        error = data.get("message") or data.get("error") or resp.reason_phrase or "Unknown error"
        log_error("Failed to create Jira issue", status_code=resp.status_code, error=error)
        return CreateIssueResult(success=False, data=data, error=str(error), status_code=resp.status_code)

    async def list_projects(self) -> List[Dict[str, Any]]:
        """Fetch available projects; raises httpx errors so callers can report them."""
        if not self._ready():
            raise RuntimeError("Gateway not configured")

        resp = await self._client.get(self._url("/api/jira/projects"), headers=self._headers())
        resp.raise_for_status()
        log_api_response("Gateway projects", resp.status_code)
        data = resp.json()
        if isinstance(data, dict):
            return list(data.get("projects") or [])
        return list(data or [])
