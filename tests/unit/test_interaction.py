"""Unit tests for the console user channel."""

from unittest.mock import patch

import pytest

from jira_agent.interaction import ConsoleChannel


class TestConsoleChannel:
    def test_show_prefixes_level(self, capsys):
        ConsoleChannel().show("Saved", "success")
        ConsoleChannel().show("plain", "unknown-level")

        out = capsys.readouterr().out.splitlines()
        assert out == ["✅ Saved", "plain"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer,expected", [("y", True), ("Yes", True), ("n", False), ("", False)])
    async def test_confirm(self, answer, expected):
        with patch("builtins.input", return_value=answer):
            assert await ConsoleChannel().confirm("Retry?") is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer,expected", [("1", 0), ("3", 2), ("4", -1), ("0", -1), ("abc", -1)])
    async def test_choose(self, answer, expected, capsys):
        with patch("builtins.input", return_value=answer):
            assert await ConsoleChannel().choose("Pick", ["a", "b", "c"]) == expected

        assert "  1. a" in capsys.readouterr().out
