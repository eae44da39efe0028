"""Configuration management using Pydantic BaseSettings.

This module provides centralized configuration management with validation,
type safety, and sensible defaults for the Jira assistant.  Every field maps
to the upper-cased environment variable of the same name.
"""
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Main configuration class combining all settings."""

    # LLM Configuration
    llm_provider: str = Field("openai", description="Generation provider: openai or bedrock")
    openai_api_key: str = Field("", description="OpenAI API key")
    openai_model: str = Field("gpt-4o-mini", description="OpenAI model to use")
    aws_region: str = Field("eu-west-1", description="AWS region for Bedrock")
    bedrock_model_id: str = Field("anthropic.claude-3-haiku-20240307-v1:0", description="Bedrock model id")

    # Automation gateway Configuration
    gateway_url: str = Field("", description="Base URL of the Jira automation gateway")
    gateway_api_key: str = Field("", description="Bearer token for the gateway")
    gateway_timeout: float = Field(30.0, ge=1.0, le=120.0, description="Gateway request timeout in seconds")

    # Duplicate detection Configuration
    dedup_similarity_threshold: float = Field(0.6, ge=0.0, le=1.0, description="Scores strictly above this are significant matches")
    dedup_high_similarity_threshold: float = Field(0.8, ge=0.0, le=1.0, description="Scores strictly above this are high-similarity matches")
    dedup_batch_size: int = Field(5, ge=1, le=20, description="Candidates scored per generation call")
    dedup_batch_delay_seconds: float = Field(0.5, ge=0.0, le=10.0, description="Pause between scoring batches")
    dedup_search_max_results: int = Field(20, ge=1, le=100, description="Max candidates fetched per search")
    dedup_max_keywords: int = Field(5, ge=1, le=10, description="Max keywords used in the candidate query")

    # Retry Configuration
    retry_max_attempts: int = Field(3, ge=0, le=10, description="Retry budget per operation context")
    retry_base_delay_seconds: float = Field(1.0, ge=0.0, le=10.0, description="First retry delay")
    retry_max_delay_seconds: float = Field(5.0, ge=0.0, le=60.0, description="Retry delay cap")

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('llm_provider')
    @classmethod
    def validate_llm_provider(cls, v):
        if v.lower() not in ['openai', 'bedrock']:
            raise ValueError('llm_provider must be "openai" or "bedrock"')
        return v.lower()

    @field_validator('log_level')
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    @field_validator('gateway_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

    @model_validator(mode='after')
    def validate_thresholds(self):
        if self.dedup_high_similarity_threshold < self.dedup_similarity_threshold:
            raise ValueError('dedup_high_similarity_threshold must not be below dedup_similarity_threshold')
        return self

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any issues."""
        issues = []

        # Check required fields
        if self.llm_provider == "openai" and not self.openai_api_key:
            issues.append("OPENAI_API_KEY is required")
        if not self.gateway_url:
            issues.append("GATEWAY_URL is required")
        elif not self.gateway_url.startswith(("http://", "https://")):
            issues.append("GATEWAY_URL must start with http:// or https://")
        if not self.gateway_api_key:
            issues.append("GATEWAY_API_KEY is required")

        # Check logical constraints
        if self.dedup_similarity_threshold < 0.3:
            issues.append("DEDUP_SIMILARITY_THRESHOLD is very low, most candidates will be reported as duplicates")

        if self.retry_max_delay_seconds < self.retry_base_delay_seconds:
            issues.append("RETRY_MAX_DELAY_SECONDS is lower than RETRY_BASE_DELAY_SECONDS")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from jira_agent.utils.logger import log_info

        log_info("Configuration loaded",
                 llm_provider=self.llm_provider,
                 openai_model=self.openai_model,
                 gateway_configured=bool(self.gateway_url),
                 similarity_threshold=self.dedup_similarity_threshold,
                 high_similarity_threshold=self.dedup_high_similarity_threshold,
                 batch_size=self.dedup_batch_size,
                 retry_max_attempts=self.retry_max_attempts,
                 log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
