# SPDX-License-Identifier: AGPL-3.0-only

"""
Configuration settings for the legal assistant.

All settings can be overridden through environment variables (case-insensitive),
e.g. ANTHROPIC_API_KEY, AI_MAX_RETRIES or VALIDATION_MODE.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALIDATION_MODES = ("repair", "strict")


class AssistantConfig(BaseSettings):
    """Configuration settings for the legal assistant."""

    # Anthropic settings
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")
    anthropic_model: str = Field(default="claude-3-5-haiku-20241022", description="Anthropic model name")
    anthropic_base_url: str = Field(default="https://api.anthropic.com", description="Anthropic API base URL")
    anthropic_version: str = Field(default="2023-06-01", description="Anthropic API version header")

    # Generation settings
    ai_timeout: float = Field(default=45.0, description="Provider request timeout in seconds")
    ai_max_tokens: int = Field(default=2000, description="Maximum tokens in the model reply")
    ai_temperature: float = Field(default=0.3, description="Sampling temperature")

    # Retry settings
    ai_max_retries: int = Field(default=2, ge=0, description="Additional attempts after the first one")
    rate_limit_backoff_seconds: float = Field(default=2.0, ge=0, description="Wait before retrying a rate-limited call")

    # Response handling
    validation_mode: str = Field(default="repair", description="Answer validation: repair or strict")
    max_document_chars: int = Field(default=10000, description="Maximum document context forwarded to the model")

    log_level: str = Field(default="INFO", description="Root log level for the HTTP app")

    model_config = SettingsConfigDict(case_sensitive=False)

    @field_validator("validation_mode")
    @classmethod
    def check_validation_mode(cls, v):
        mode = (v or "").strip().lower()
        if mode not in VALIDATION_MODES:
            raise ValueError(f"validation_mode must be one of {', '.join(VALIDATION_MODES)}")
        return mode

    def get_ai_config(self) -> dict:
        """Get AI provider configuration."""
        return {
            "timeout": self.ai_timeout,
            "max_tokens": self.ai_max_tokens,
            "temperature": self.ai_temperature,
            "anthropic": {
                "api_key": self.anthropic_api_key,
                "model": self.anthropic_model,
                "base_url": self.anthropic_base_url.rstrip("/"),
                "version": self.anthropic_version,
            }
        }

    def get_retry_config(self) -> dict:
        """Get retry configuration."""
        return {
            "max_attempts": self.ai_max_retries + 1,
            "rate_limit_backoff": self.rate_limit_backoff_seconds,
        }

    def has_api_key(self) -> bool:
        return bool(self.anthropic_api_key and self.anthropic_api_key.strip())


# Global configuration instance
config = AssistantConfig()
