"""Search keyword extraction.

The generation service picks 3-5 search terms; when it fails or answers
with something other than a list of strings, a local heuristic takes over.
"""

from __future__ import annotations

import string
from typing import List, Optional

from jira_agent.llm_factory import TextGenerator, generate_text
from jira_agent.utils.llm_json import LLMPayloadError, parse_llm_payload
from jira_agent.utils.logger import log_debug, log_warning

DEFAULT_KEYWORD = "issue"

KEYWORD_SYSTEM_PROMPT = (
    "Extract 3-5 key search terms from the following issue title and description. "
    "Focus on technical terms, feature names, component names, and important nouns. "
    "Return only the keywords as a JSON array of strings. "
    'Example: ["login", "authentication", "error", "user"]'
)


def extract_keywords_fallback(title: str, description: str, max_keywords: int = 5) -> List[str]:
    """Heuristic keywords: first words longer than 3 chars that are not numbers.

    Surrounding punctuation is stripped first, so ``"fails!!!"`` yields
    ``"fails"`` and punctuation-only tokens disappear.
    """
    text = f"{title or ''} {description or ''}".lower()
    words = []
    for raw in text.split():
        word = raw.strip(string.punctuation)
        if len(word) > 3 and not word.isdigit():
            words.append(word)
        if len(words) >= max_keywords:
            break
    return words or [DEFAULT_KEYWORD]


def _keywords_from_payload(payload, max_keywords: int) -> Optional[List[str]]:
    if isinstance(payload, dict):
        payload = payload.get("keywords")
    if not isinstance(payload, list):
        return None
    keywords = [item.strip() for item in payload if isinstance(item, str) and item.strip()]
    return keywords[:max_keywords] or None


async def extract_keywords(
    title: str,
    description: str,
    generate: TextGenerator = generate_text,
    max_keywords: int = 5,
) -> List[str]:
    """Ask the generation service for search terms; never raises."""
    try:
        reply = await generate(
            KEYWORD_SYSTEM_PROMPT,
            f"Title: {title}\nDescription: {description}",
            temperature=0.3,
            max_tokens=100,
        )
    except Exception as e:
        log_warning("Keyword extraction call failed, using heuristic", error=str(e))
        return extract_keywords_fallback(title, description, max_keywords)

    try:
        keywords = _keywords_from_payload(parse_llm_payload(reply), max_keywords)
    except LLMPayloadError as e:
        log_warning("Keyword reply not decodable, using heuristic", error=str(e))
        keywords = None

    if not keywords:
        return extract_keywords_fallback(title, description, max_keywords)

    log_debug("Keywords extracted", keywords=keywords)
    return keywords
