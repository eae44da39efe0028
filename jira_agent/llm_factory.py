"""LLM provider factory.

Centralizes all chat model instantiation.  Supports OpenAI and AWS Bedrock,
switchable via the LLM_PROVIDER setting.

Entry points:
- ``get_langchain_llm()`` -- LangChain chat model for the configured provider
- ``generate_text()``     -- one async system+prompt call returning plain text
- ``ping_llm()``          -- minimal call for health checks
"""

from __future__ import annotations

from typing import Awaitable, Protocol

from langchain_core.messages import HumanMessage, SystemMessage

from jira_agent.config import get_config
from jira_agent.utils.logger import log_debug


class TextGenerator(Protocol):
    """Anything that maps a system instruction plus prompt to a completion."""

    def __call__(
        self,
        system: str,
        prompt: str,
        *,
        temperature: float = ...,
        max_tokens: int = ...,
    ) -> Awaitable[str]:
        ...


def get_langchain_llm(temperature: float = 0.0, max_tokens: int = 500):
    """Return a LangChain chat model based on LLM_PROVIDER.

    For openai:  ChatOpenAI.
    For bedrock: ChatBedrockConverse.
    """
    config = get_config()

    if config.llm_provider == "bedrock":
        from langchain_aws import ChatBedrockConverse

        log_debug("Using Bedrock LLM", model_id=config.bedrock_model_id, region=config.aws_region)
        return ChatBedrockConverse(
            model=config.bedrock_model_id,
            region_name=config.aws_region,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    # Default: OpenAI
    from langchain_openai import ChatOpenAI

    log_debug("Using OpenAI LLM", model=config.openai_model)
    return ChatOpenAI(
        model=config.openai_model,
        api_key=config.openai_api_key or None,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def _content_text(content) -> str:
    """Flatten a LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


async def generate_text(
    system: str,
    prompt: str,
    *,
    temperature: float = 0.0,
    max_tokens: int = 500,
) -> str:
    """Single asynchronous completion.

    Args:
        system: System instruction.
        prompt: Task-specific user message.
        temperature: Sampling temperature.
        max_tokens: Max output tokens.

    Returns:
        The assistant message content as a string (may be empty).
    """
    llm = get_langchain_llm(temperature=temperature, max_tokens=max_tokens)
    response = await llm.ainvoke([SystemMessage(content=system), HumanMessage(content=prompt)])
    return _content_text(response.content).strip()


async def ping_llm() -> str:
    """Minimal LLM call for health checking.

    Returns:
        Provider description string on success (e.g. "OpenAI (gpt-4o-mini)").
    """
    config = get_config()
    llm = get_langchain_llm(temperature=0.0, max_tokens=1)
    await llm.ainvoke([HumanMessage(content="ping")])
    if config.llm_provider == "bedrock":
        return f"Bedrock ({config.bedrock_model_id})"
    return f"OpenAI ({config.openai_model})"
