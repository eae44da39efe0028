"""Sanitized logging for the Jira assistant.

Every helper takes a message plus keyword context.  The context is rendered
as JSON and scrubbed of credentials, e-mail addresses and URLs before it
reaches the log, because gateway and LLM payloads routinely echo them.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional, Pattern, Tuple

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('jira-agent')

# Applied in order; earlier patterns win over the generic token/hex rules.
_REDACTIONS: List[Tuple[Pattern[str], str]] = [
    (re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}'), '<email>'),
    (re.compile(r'sk-[a-zA-Z0-9_-]{20,}'), '<api-key>'),
    (re.compile(r'Bearer\s+[^\s"]+'), 'Bearer <token>'),
    (re.compile(r'[a-zA-Z0-9]{32,}'), '<token>'),
    (re.compile(r'https?://[^\s"]+'), '<url>'),
    (re.compile(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', re.IGNORECASE), '<uuid>'),
    (re.compile(r'\b[0-9a-f]{24,}\b', re.IGNORECASE), '<hash>'),
]

TRUNCATION_MARK = "... [truncated]"


def set_log_level(level: str) -> None:
    """Apply a textual log level (e.g. ``"DEBUG"``) to the assistant logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def sanitize_text(text: str) -> str:
    """Replace secrets and personal data in *text* with placeholders."""
    if not text:
        return text
    for pattern, placeholder in _REDACTIONS:
        text = pattern.sub(placeholder, text)
    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Serialize *obj* for a log line: sanitized, and cut at *max_length*."""
    try:
        rendered = json.dumps(obj, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    rendered = sanitize_text(rendered)
    if len(rendered) > max_length:
        rendered = rendered[:max_length] + TRUNCATION_MARK
    return rendered


def _emit(level: int, message: str, context: Dict[str, Any]) -> None:
    if not logger.isEnabledFor(level):
        return
    if context:
        logger.log(level, f"{message} | Context: {safe_json(context)}")
    else:
        logger.log(level, message)


def log_info(message: str, **kwargs) -> None:
    _emit(logging.INFO, message, kwargs)


def log_warning(message: str, **kwargs) -> None:
    _emit(logging.WARNING, message, kwargs)


def log_error(message: str, **kwargs) -> None:
    _emit(logging.ERROR, message, kwargs)


def log_debug(message: str, **kwargs) -> None:
    _emit(logging.DEBUG, message, kwargs)


def log_api_response(operation: str, status_code: int, response_data: Optional[Dict] = None) -> None:
    """Record a completed gateway call; the body preview is capped at 500 chars."""
    if response_data:
        log_info(f"API {operation} completed",
                 status_code=status_code,
                 response_preview=safe_json(response_data, max_length=500))
    else:
        log_info(f"API {operation} completed", status_code=status_code)


def log_duplicate_detection(score: float, existing_key: str, **kwargs) -> None:
    """Log a candidate that scored above the significance threshold.

    Args:
        score: Similarity score in [0, 1]
        existing_key: Key of the existing issue
        **kwargs: Additional context (e.g. the scorer's reason)
    """
    log_warning("Potential duplicate detected",
                similarity_score=round(score, 3),
                existing_issue=existing_key,
                **kwargs)


def log_retry_decision(context: str, decision: str, **kwargs) -> None:
    """Record what the retry controller decided for an operation context."""
    log_info(f"Retry decision: {decision}", context=context, **kwargs)


def log_agent_progress(stage: str, **kwargs) -> None:
    log_info(f"Agent progress: {stage}", **kwargs)
