"""Pytest configuration and fixtures for jira-agent tests."""

import sys
from pathlib import Path
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def pytest_collection_modifyitems(config, items):
    """Tag tests under tests/unit with the ``unit`` marker."""
    for item in items:
        if "unit" in Path(str(item.fspath)).parts:
            item.add_marker(pytest.mark.unit)


class ScriptedChannel:
    """UserChannel double that replays canned answers and records output."""

    def __init__(self, confirms: Optional[List[bool]] = None, choices: Optional[List[int]] = None):
        self.confirms = list(confirms or [])
        self.choices = list(choices or [])
        self.messages = []
        self.questions = []
        self.pauses = 0

    def show(self, message: str, level: str = "info") -> None:
        self.messages.append((level, message))

    async def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.confirms.pop(0) if self.confirms else False

    async def choose(self, question: str, options: List[str]) -> int:
        self.questions.append(question)
        return self.choices.pop(0) if self.choices else -1

    async def pause(self, message: str) -> None:
        self.pauses += 1

    def text(self) -> str:
        return "\n".join(message for _, message in self.messages)


def make_record(key, summary, description="", status="To Do", priority="Medium"):
    fields = {"summary": summary, "description": description, "status": {"name": status}}
    if priority is not None:
        fields["priority"] = {"name": priority}
    return {"key": key, "fields": fields}


@pytest.fixture
def channel():
    return ScriptedChannel()


@pytest.fixture
def channel_factory():
    """Build ScriptedChannel instances with canned answers."""
    return ScriptedChannel


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def no_sleep():
    """Awaitable sleep that records requested delays instead of waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def mock_config():
    """Mock configuration for testing."""
    config = MagicMock()
    config.llm_provider = "openai"
    config.openai_api_key = "test-openai-key"
    config.openai_model = "gpt-4o-mini"
    config.aws_region = "eu-west-1"
    config.bedrock_model_id = "anthropic.claude-3-haiku-20240307-v1:0"
    config.gateway_url = "https://gateway.test"
    config.gateway_api_key = "test-gateway-key"
    config.gateway_timeout = 30.0
    config.dedup_similarity_threshold = 0.6
    config.dedup_high_similarity_threshold = 0.8
    config.dedup_batch_size = 5
    config.dedup_batch_delay_seconds = 0.5
    config.dedup_search_max_results = 20
    config.dedup_max_keywords = 5
    config.retry_max_attempts = 3
    config.retry_base_delay_seconds = 1.0
    config.retry_max_delay_seconds = 5.0
    config.log_level = "INFO"
    config.validate_configuration.return_value = []
    return config


@pytest.fixture
def sample_records():
    return [
        make_record("PROJ-1", "Login fails with SSO", "Users cannot sign in through SSO"),
        make_record("PROJ-2", "Password reset email missing", "No email after reset request", status="In Progress"),
        make_record("PROJ-3", "Dashboard slow to load", None, priority=None),
    ]


@pytest.fixture
def search_backend(sample_records):
    """Gateway double exposing both search dialects."""
    backend = MagicMock()
    backend.search = AsyncMock(return_value={"issues": sample_records})
    backend.search_text = AsyncMock(return_value={"issues": []})
    return backend
