"""User-confirmed retry with exponential backoff.

The ``RetryController`` decides, per operation context, whether a failed
call should be attempted again.  Retryable errors prompt the user through a
``UserChannel``; on confirmation the controller waits
``min(base * 2**attempt, max)`` seconds while showing a countdown.

Attempt counters live in a ``RetryState`` owned by the caller (one per user
session).  Context labels act as a namespace inside that state: reusing a
label for unrelated operations shares its budget.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional

from jira_agent.interaction import UserChannel
from jira_agent.utils.errors import AppError, classify, hints_for
from jira_agent.utils.logger import log_debug, log_error, log_retry_decision, log_warning

DEFAULT_CONTEXT = "default"

Sleep = Callable[[float], Awaitable[Any]]


@dataclass
class RetryState:
    """Attempt counters keyed by operation context."""

    attempts: Dict[str, int] = field(default_factory=dict)

    def get(self, context: str) -> int:
        return self.attempts.get(context, 0)

    def increment(self, context: str) -> int:
        self.attempts[context] = self.get(context) + 1
        return self.attempts[context]

    def reset(self, context: str) -> None:
        self.attempts.pop(context, None)


class RetryConfig:
    """Retry controller configuration."""

    def __init__(
        self,
        max_retries: int = 3,
        base_delay_seconds: float = 1.0,
        max_delay_seconds: float = 5.0,
    ):
        self.max_retries = max_retries
        self.base_delay_seconds = base_delay_seconds
        self.max_delay_seconds = max_delay_seconds

    @classmethod
    def from_config(cls, config) -> "RetryConfig":
        return cls(
            max_retries=config.retry_max_attempts,
            base_delay_seconds=config.retry_base_delay_seconds,
            max_delay_seconds=config.retry_max_delay_seconds,
        )


class RetryController:
    """Classify failures, explain them, and ask whether to retry."""

    def __init__(
        self,
        channel: UserChannel,
        config: Optional[RetryConfig] = None,
        state: Optional[RetryState] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.channel = channel
        self.config = config or RetryConfig()
        self.state = state if state is not None else RetryState()
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt + 1`` (``attempt`` is zero-based)."""
        return min(
            self.config.base_delay_seconds * (2 ** attempt),
            self.config.max_delay_seconds,
        )

    def report(self, error: BaseException, context: Optional[str] = None) -> AppError:
        """Classify *error* and show it with remediation hints. Never prompts."""
        app_error = classify(error)
        log_error(
            "Operation failed",
            context=context or DEFAULT_CONTEXT,
            kind=app_error.kind.value,
            retryable=app_error.is_retryable,
            status_code=app_error.status_code,
            error=app_error.message,
            cause=repr(app_error.cause) if app_error.cause else None,
        )

        context_str = f" ({context})" if context else ""
        self.channel.show(f"Error{context_str}: {app_error.message}", "error")
        hints = hints_for(app_error)
        if hints:
            self.channel.show("Troubleshooting tips:", "warning")
            for hint in hints:
                self.channel.show(hint, "hint")
        return app_error

    async def handle(self, error: BaseException, context: str = DEFAULT_CONTEXT) -> bool:
        """Return True when the caller should re-run the failed operation."""
        app_error = self.report(error, context)

        if not app_error.is_retryable:
            return False

        if self.state.get(context) >= self.config.max_retries:
            log_warning(
                "Retry budget exhausted",
                context=context,
                max_retries=self.config.max_retries,
            )
            self.state.reset(context)
            return False

        return await self._prompt_for_retry(context)

    async def _prompt_for_retry(self, context: str) -> bool:
        attempts = self.state.get(context)
        confirmed = await self.channel.confirm(
            f"Would you like to retry? (Attempt {attempts + 1}/{self.config.max_retries})"
        )
        if not confirmed:
            log_retry_decision(context, "declined", attempts=attempts)
            self.state.reset(context)
            return False

        self.state.increment(context)
        log_retry_decision(context, "retrying", attempt=attempts + 1)
        await self._retry_delay(attempts)
        return True

    async def _retry_delay(self, attempt: int) -> None:
        delay = self.backoff_delay(attempt)
        self.channel.show(f"Waiting {delay:g} seconds before retry...", "warning")

        whole_seconds = int(delay)
        for remaining in range(whole_seconds, 0, -1):
            self.channel.show(f"{remaining}s remaining...", "muted")
            await self._sleep(1)
        remainder = delay - whole_seconds
        if remainder > 0:
            await self._sleep(remainder)

    def reset_retry_count(self, context: str = DEFAULT_CONTEXT) -> None:
        """Forget previous attempts; call after the operation finally succeeds."""
        self.state.reset(context)


class OperationRunner:
    """Run an async operation, deferring to the controller after each failure.

    At most ``max_retries + 1`` attempts are made.  The last failure, or any
    failure the user declines to retry, is re-raised unchanged, and the
    context's attempt counter is cleared before it propagates.
    """

    def __init__(self, controller: RetryController):
        self.controller = controller

    async def run(
        self,
        operation: Callable[[], Awaitable[Any]],
        context: str,
        max_retries: Optional[int] = None,
    ) -> Any:
        if max_retries is None:
            max_retries = self.controller.config.max_retries

        for attempt in range(max_retries + 1):
            try:
                return await operation()
            except Exception as e:
                if attempt == max_retries:
                    log_debug("Final attempt failed, propagating", context=context, attempt=attempt + 1)
                    self.controller.reset_retry_count(context)
                    raise

                should_retry = await self.controller.handle(e, context)
                if not should_retry:
                    self.controller.reset_retry_count(context)
                    raise
