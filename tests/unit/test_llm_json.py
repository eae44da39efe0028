"""Tests for LLM reply JSON parsing and sanitization."""

import pytest

from jira_agent.utils.llm_json import (
    LLMPayloadError,
    escape_control_chars,
    parse_llm_payload,
    strip_code_fence,
)


class TestParseLlmPayload:
    def test_valid_object(self):
        assert parse_llm_payload('{"a": 1}') == {"a": 1}

    def test_valid_array(self):
        assert parse_llm_payload('[{"issueIndex": 1}]') == [{"issueIndex": 1}]

    def test_code_fence(self):
        assert parse_llm_payload('Here you go:\n```json\n["x"]\n```') == ["x"]

    def test_unescaped_newline_in_string(self):
        raw = '[{"issueIndex": 1, "reason": "line one\nline two"}]'
        assert parse_llm_payload(raw)[0]["reason"] == "line one\nline two"

    def test_unescaped_tab_in_string(self):
        raw = '{"reason": "a\tb"}'
        assert parse_llm_payload(raw) == {"reason": "a\tb"}

    @pytest.mark.parametrize("raw", [None, "", "   ", "not json at all", "[1, 2"])
    def test_invalid(self, raw):
        with pytest.raises(LLMPayloadError):
            parse_llm_payload(raw)

    def test_error_is_value_error(self):
        assert issubclass(LLMPayloadError, ValueError)


def test_strip_code_fence_without_fence():
    assert strip_code_fence("  [1]  ") == "[1]"


def test_escaped_backslash_before_quote():
    raw = '{"path": "C:\\\\", "reason": "l1\nl2"}'
    assert parse_llm_payload(raw) == {"path": "C:\\", "reason": "l1\nl2"}


def test_whitespace_outside_strings_is_kept():
    assert escape_control_chars('{\n  "a": "b\tc"\n}') == '{\n  "a": "b\\tc"\n}'
