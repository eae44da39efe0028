"""Pre-flight checks for the assistant's external dependencies.

``python -m jira_agent.healthcheck`` (or ``main.py health``) validates the
settings, pings the generation service and lists gateway projects.
"""
from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Tuple

from jira_agent.config import get_config
from jira_agent.gateway.client import AsyncGatewayClient
from jira_agent.llm_factory import ping_llm
from jira_agent.utils.logger import log_error, log_info

ERROR_PREVIEW_CHARS = 100


@dataclass
class HealthCheckResult:
    """Outcome of one dependency check."""
    service: str
    healthy: bool
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


def _short(error: Exception) -> str:
    text = str(error) or type(error).__name__
    if len(text) > ERROR_PREVIEW_CHARS:
        text = text[:ERROR_PREVIEW_CHARS] + "..."
    return text


async def check_configuration() -> HealthCheckResult:
    issues = get_config().validate_configuration()
    if issues:
        return HealthCheckResult("Configuration", False, "; ".join(issues), {"issues": issues})
    return HealthCheckResult("Configuration", True, "Valid")


async def check_llm() -> HealthCheckResult:
    """Ping the configured generation provider with a one-token call."""
    config = get_config()
    if config.llm_provider == "openai" and not config.openai_api_key:
        return HealthCheckResult("LLM", False, "OPENAI_API_KEY not set")

    try:
        description = await ping_llm()
    except Exception as e:
        return HealthCheckResult("LLM", False, f"Connection failed: {_short(e)}")

    return HealthCheckResult(
        "LLM", True, f"Connected ({description})", {"provider": config.llm_provider}
    )


async def check_gateway() -> HealthCheckResult:
    """List projects through the gateway to prove URL and token work."""
    config = get_config()

    missing = [name for name, value in (
        ("GATEWAY_URL", config.gateway_url),
        ("GATEWAY_API_KEY", config.gateway_api_key),
    ) if not value]
    if missing:
        return HealthCheckResult("Gateway", False, f"Missing: {', '.join(missing)}")

    try:
        async with AsyncGatewayClient(config) as client:
            projects = await client.list_projects()
    except Exception as e:
        return HealthCheckResult("Gateway", False, f"Connection failed: {_short(e)}")

    return HealthCheckResult(
        "Gateway",
        True,
        f"Connected ({len(projects)} projects visible)",
        {"project_count": len(projects)},
    )


HealthCheck = Callable[[], Awaitable[HealthCheckResult]]


def _checks() -> List[Tuple[str, HealthCheck]]:
    return [
        ("configuration", check_configuration),
        ("generation service", check_llm),
        ("automation gateway", check_gateway),
    ]


async def run_health_checks(verbose: bool = True) -> Tuple[bool, List[HealthCheckResult]]:
    """Run every check in order.

    Returns:
        (all_healthy, results). With ``verbose`` each result is also printed.
    """
    if verbose:
        print("\n🔍 Running health checks...\n")

    results: List[HealthCheckResult] = []
    for label, check in _checks():
        if verbose:
            print(f"  Checking {label}...", end=" ", flush=True)
        result = await check()
        results.append(result)

        if result.healthy:
            log_info(f"Health check passed: {result.service}", **result.details)
        else:
            log_error(f"Health check failed: {result.service}", message=result.message)
        if verbose:
            print(f"{'✓' if result.healthy else '✗'} {result.message}")

    all_healthy = all(r.healthy for r in results)
    if verbose:
        failed = ", ".join(r.service for r in results if not r.healthy)
        print("\n✅ All services ready!\n" if all_healthy else f"\n❌ Health check failed for: {failed}\n")
    return all_healthy, results


if __name__ == "__main__":
    from dotenv import load_dotenv
    load_dotenv()

    healthy, _ = asyncio.run(run_health_checks())
    sys.exit(0 if healthy else 1)
