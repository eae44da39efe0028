"""Error taxonomy and pattern-based classification.

Every failure that reaches the user is normalized into an ``AppError`` with a
fixed ``ErrorKind``.  Classification looks at the lower-cased exception type
name plus its message; the first matching rule wins.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple


class ErrorKind(Enum):
    """Error categories surfaced to the user."""

    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    REMOTE_API = "remote_api"
    GENERATION_SERVICE = "generation_service"
    UNKNOWN = "unknown"


class AppError(Exception):
    """A classified failure.

    ``kind`` is fixed at construction time.  ``cause`` keeps the original
    exception, if any, for logging.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        is_retryable: bool = False,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self._kind = kind
        self.is_retryable = is_retryable
        self.status_code = status_code
        self.cause = cause

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    def __repr__(self) -> str:
        return (
            f"AppError(kind={self._kind.value}, retryable={self.is_retryable}, "
            f"status_code={self.status_code}, message={self.message!r})"
        )


NETWORK_INDICATORS: Tuple[str, ...] = (
    "econnrefused",
    "connection refused",
    "enotfound",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "timeout",
    "timed out",
)
AUTH_INDICATORS: Tuple[str, ...] = ("401", "unauthorized", "invalid api key")
REMOTE_API_CODES: Tuple[int, ...] = (400, 403, 404)
GENERATION_INDICATORS: Tuple[str, ...] = ("openai", "gpt", "bedrock")

REMEDIATION_HINTS: Dict[ErrorKind, List[str]] = {
    ErrorKind.NETWORK: [
        "Check your internet connection",
        "Verify GATEWAY_URL in your .env file",
        "Try again in a few moments",
    ],
    ErrorKind.AUTHENTICATION: [
        "Check OPENAI_API_KEY in your .env file",
        "Verify GATEWAY_API_KEY for the automation gateway",
        "Ensure Jira permissions are properly configured",
    ],
    ErrorKind.VALIDATION: [
        "Please check your input and try again",
    ],
    ErrorKind.REMOTE_API: [
        "Verify the project exists and you have access",
        "Check your Jira permissions",
        "Try with a different project",
    ],
    ErrorKind.GENERATION_SERVICE: [
        "Check your API quota and billing",
        "Verify your API key is valid",
        "Try again in a few moments",
    ],
    ErrorKind.UNKNOWN: [],
}


def _status_code_of(error: BaseException) -> Optional[int]:
    """Return the HTTP status code attached to *error*, if any."""
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify(error: BaseException) -> AppError:
    """Normalize any exception into an ``AppError``.

    Already-classified errors are returned unchanged.
    """
    if isinstance(error, AppError):
        return error

    raw_message = str(error)
    haystack = f"{type(error).__name__} {raw_message}".lower()
    status_code = _status_code_of(error)

    if any(token in haystack for token in NETWORK_INDICATORS):
        return AppError(
            "Network connection failed. Please check your internet connection and try again.",
            ErrorKind.NETWORK,
            is_retryable=False,
            status_code=status_code,
            cause=error,
        )

    if any(token in haystack for token in AUTH_INDICATORS) or status_code == 401:
        return AppError(
            "Authentication failed. Please check your API credentials in the .env file.",
            ErrorKind.AUTHENTICATION,
            is_retryable=False,
            status_code=status_code or 401,
            cause=error,
        )

    api_code = next((code for code in REMOTE_API_CODES if str(code) in haystack), None)
    if api_code is not None or status_code in REMOTE_API_CODES:
        return AppError(
            "Jira API error. Please check your project permissions and try again.",
            ErrorKind.REMOTE_API,
            is_retryable=True,
            status_code=status_code or api_code,
            cause=error,
        )

    if any(token in haystack for token in GENERATION_INDICATORS):
        return AppError(
            "Text generation service error. Please check your API key and quota.",
            ErrorKind.GENERATION_SERVICE,
            is_retryable=True,
            status_code=status_code,
            cause=error,
        )

    return AppError(
        raw_message or "An unexpected error occurred.",
        ErrorKind.UNKNOWN,
        is_retryable=True,
        status_code=status_code,
        cause=error,
    )


def hints_for(error: AppError) -> List[str]:
    """Remediation tips shown next to *error*."""
    return list(REMEDIATION_HINTS.get(error.kind, []))


def network_error(message: str) -> AppError:
    return AppError(message, ErrorKind.NETWORK, is_retryable=False)


def auth_error(message: str) -> AppError:
    return AppError(message, ErrorKind.AUTHENTICATION, is_retryable=False)


def validation_error(message: str) -> AppError:
    return AppError(message, ErrorKind.VALIDATION, is_retryable=False)


def remote_api_error(message: str, status_code: Optional[int] = None) -> AppError:
    return AppError(message, ErrorKind.REMOTE_API, is_retryable=True, status_code=status_code)


def generation_error(message: str) -> AppError:
    return AppError(message, ErrorKind.GENERATION_SERVICE, is_retryable=True)
