"""Unit tests for sanitized logging helpers."""

import logging

from jira_agent.utils.logger import log_warning, safe_json, sanitize_text, set_log_level


class TestSanitizeText:
    def test_email(self):
        assert sanitize_text("contact dev@example.com") == "contact <email>"

    def test_openai_key(self):
        assert sanitize_text("key sk-abcdefghijklmnopqrstuvwxyz") == "key <api-key>"

    def test_bearer_token(self):
        assert sanitize_text("Authorization: Bearer gw.token.value") == "Authorization: Bearer <token>"

    def test_empty(self):
        assert sanitize_text("") == ""


def test_safe_json_truncates():
    out = safe_json({"reason": "x " * 100}, max_length=50)
    assert out.endswith("... [truncated]")


def test_context_is_sanitized(caplog):
    set_log_level("DEBUG")
    with caplog.at_level(logging.WARNING, logger="jira-agent"):
        log_warning("Gateway call failed", url="https://gateway.test/api/jira/search")

    assert "<url>" in caplog.text
    assert "gateway.test" not in caplog.text
    set_log_level("INFO")
