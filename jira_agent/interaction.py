"""User interaction capability.

Business logic never talks to the terminal directly.  It receives a
``UserChannel`` and awaits typed answers from it, so retry and duplicate
decisions can be driven by a script in tests.
"""

from __future__ import annotations

import asyncio
from typing import List, Protocol

_LEVEL_PREFIX = {
    "info": "ℹ️ ",
    "success": "✅",
    "warning": "⚠️ ",
    "error": "❌",
    "hint": "   •",
    "muted": "  ",
}


class UserChannel(Protocol):
    """What the core needs from whoever is at the keyboard."""

    def show(self, message: str, level: str = "info") -> None:
        ...

    async def confirm(self, question: str) -> bool:
        ...

    async def choose(self, question: str, options: List[str]) -> int:
        ...

    async def pause(self, message: str) -> None:
        ...


class ConsoleChannel:
    """Terminal implementation of ``UserChannel``.

    ``input()`` runs in a worker thread so the event loop is not blocked.
    """

    async def _ask(self, prompt: str) -> str:
        return await asyncio.to_thread(input, prompt)

    def show(self, message: str, level: str = "info") -> None:
        prefix = _LEVEL_PREFIX.get(level, "")
        print(f"{prefix} {message}" if prefix else message)

    async def confirm(self, question: str) -> bool:
        answer = await self._ask(f"{question} (y/n): ")
        return answer.strip().lower().startswith("y")

    async def choose(self, question: str, options: List[str]) -> int:
        print(question)
        for index, option in enumerate(options, start=1):
            print(f"  {index}. {option}")
        answer = await self._ask("Enter number: ")
        try:
            choice = int(answer.strip()) - 1
        except ValueError:
            return -1
        return choice if 0 <= choice < len(options) else -1

    async def pause(self, message: str) -> None:
        await self._ask(f"{message} ")
