"""Unit tests for service health checks."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jira_agent.healthcheck import (
    HealthCheckResult,
    check_configuration,
    check_gateway,
    check_llm,
    run_health_checks,
)


class TestCheckLlm:
    @pytest.mark.asyncio
    async def test_missing_key(self, mock_config):
        mock_config.openai_api_key = ""
        with patch("jira_agent.healthcheck.get_config", return_value=mock_config):
            result = await check_llm()

        assert result.healthy is False
        assert result.message == "OPENAI_API_KEY not set"

    @pytest.mark.asyncio
    async def test_connected(self, mock_config):
        with patch("jira_agent.healthcheck.get_config", return_value=mock_config), \
                patch("jira_agent.healthcheck.ping_llm", AsyncMock(return_value="OpenAI (gpt-4o-mini)")):
            result = await check_llm()

        assert result.healthy is True
        assert result.message == "Connected (OpenAI (gpt-4o-mini))"

    @pytest.mark.asyncio
    async def test_long_error_truncated(self, mock_config):
        with patch("jira_agent.healthcheck.get_config", return_value=mock_config), \
                patch("jira_agent.healthcheck.ping_llm", AsyncMock(side_effect=RuntimeError("x" * 150))):
            result = await check_llm()

        assert result.healthy is False
        assert result.message == f"Connection failed: {'x' * 100}..."


class TestCheckGateway:
    @pytest.mark.asyncio
    async def test_missing_settings(self, mock_config):
        mock_config.gateway_url = ""
        mock_config.gateway_api_key = ""
        with patch("jira_agent.healthcheck.get_config", return_value=mock_config):
            result = await check_gateway()

        assert result.message == "Missing: GATEWAY_URL, GATEWAY_API_KEY"

    @pytest.mark.asyncio
    async def test_connected(self, mock_config):
        client = MagicMock()
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=None)
        client.list_projects = AsyncMock(return_value=[{"key": "A"}, {"key": "B"}])

        with patch("jira_agent.healthcheck.get_config", return_value=mock_config), \
                patch("jira_agent.healthcheck.AsyncGatewayClient", return_value=client):
            result = await check_gateway()

        assert result.healthy is True
        assert result.details == {"project_count": 2}


@pytest.mark.asyncio
async def test_run_health_checks_aggregates():
    ok = HealthCheckResult(service="LLM", healthy=True, message="Connected")
    bad = HealthCheckResult(service="Gateway", healthy=False, message="Missing: GATEWAY_URL")

    with patch("jira_agent.healthcheck.check_configuration", AsyncMock(return_value=ok)), \
            patch("jira_agent.healthcheck.check_llm", AsyncMock(return_value=ok)), \
            patch("jira_agent.healthcheck.check_gateway", AsyncMock(return_value=bad)):
        all_healthy, results = await run_health_checks(verbose=False)

    assert all_healthy is False
    assert results == [ok, ok, bad]


class TestCheckConfiguration:
    @pytest.mark.asyncio
    async def test_valid(self, mock_config):
        with patch("jira_agent.healthcheck.get_config", return_value=mock_config):
            result = await check_configuration()

        assert result.healthy is True

    @pytest.mark.asyncio
    async def test_issues_listed(self, mock_config):
        mock_config.validate_configuration.return_value = ["GATEWAY_URL is required", "GATEWAY_API_KEY is required"]
        with patch("jira_agent.healthcheck.get_config", return_value=mock_config):
            result = await check_configuration()

        assert result.healthy is False
        assert result.message == "GATEWAY_URL is required; GATEWAY_API_KEY is required"
