# SPDX-License-Identifier: AGPL-3.0-only

"""
Anthropic Messages API client.

One call per invocation; retrying is left to the caller. Provider failures are
translated into the typed errors of ``common.errors``.
"""
import logging
from typing import Any, Dict, Optional

import requests

from .errors import (
    AuthenticationError,
    ConfigurationError,
    EmptyResponseError,
    ProviderError,
    RateLimitError,
    ServiceUnavailableError,
    UnexpectedContentError,
)


logger = logging.getLogger(__name__)


class AnthropicClient:
    """Thin wrapper over POST /v1/messages."""

    def __init__(self, api_key: Optional[str], model: str, base_url: str = "https://api.anthropic.com",
                 version: str = "2023-06-01", timeout: float = 45.0, max_tokens: int = 2000,
                 temperature: float = 0.3, session: Optional[requests.Session] = None):
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "Anthropic API key not configured. Set ANTHROPIC_API_KEY environment variable."
            )
        self.api_key = api_key.strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.timeout = timeout
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.session = session

    @classmethod
    def from_config(cls, ai_config: Dict[str, Any]) -> "AnthropicClient":
        """Build a client from ``AssistantConfig.get_ai_config()``."""
        anthropic = ai_config["anthropic"]
        return cls(
            api_key=anthropic["api_key"],
            model=anthropic["model"],
            base_url=anthropic["base_url"],
            version=anthropic["version"],
            timeout=ai_config["timeout"],
            max_tokens=ai_config["max_tokens"],
            temperature=ai_config["temperature"],
        )

    def complete(self, system_prompt: str, user_content: str) -> Dict[str, Any]:
        """
        Send one request and return the text reply.

        Returns: {"text": str, "tokens": int, "stop_reason": str}
        """
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.version,
            "Content-Type": "application/json"
        }

        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": user_content}],
        }
        if system_prompt:
            payload["system"] = system_prompt

        post = self.session.post if self.session is not None else requests.post
        try:
            resp = post(
                f"{self.base_url}/v1/messages",
                headers=headers,
                json=payload,
                timeout=self.timeout
            )
        except requests.Timeout as e:
            raise ServiceUnavailableError(f"Anthropic request timed out after {self.timeout}s") from e
        except requests.ConnectionError as e:
            raise ServiceUnavailableError(f"Could not reach Anthropic API: {e}") from e

        if resp.status_code >= 400:
            self._raise_for_status(resp)

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError("Anthropic API returned a non-JSON body", resp.status_code) from e
        if not isinstance(data, dict):
            raise ProviderError("Anthropic API returned an unexpected body", resp.status_code)

        content = data.get("content") or []
        if not isinstance(content, list):
            raise ProviderError("Anthropic API returned a malformed content field", resp.status_code)
        if not content:
            raise EmptyResponseError("Claude returned empty content array", resp.status_code)

        first = content[0]
        block_type = first.get("type") if isinstance(first, dict) else None
        if block_type != "text":
            raise UnexpectedContentError(f"Unexpected response type from Claude: {block_type}", resp.status_code)

        usage = data.get("usage")
        if not isinstance(usage, dict):
            usage = {}
        tokens = _token_count(usage.get("input_tokens")) + _token_count(usage.get("output_tokens"))
        stop_reason = data.get("stop_reason") or ""
        logger.debug("Claude reply received: stop_reason=%s tokens=%d", stop_reason, tokens)

        return {"text": first.get("text") or "", "tokens": tokens, "stop_reason": stop_reason}

    def _raise_for_status(self, resp) -> None:
        status = resp.status_code
        detail = _error_message(resp)

        if status in (401, 403):
            raise AuthenticationError(f"ANTHROPIC_API_KEY is invalid or expired ({detail})", status)
        if status == 429:
            raise RateLimitError(f"Anthropic rate limit exceeded ({detail})", status,
                                 retry_after=_retry_after(resp))
        if status >= 500:
            raise ServiceUnavailableError(f"Anthropic service error {status} ({detail})", status)
        raise ProviderError(f"Anthropic API returned status {status} ({detail})", status)


def _error_message(resp) -> str:
    """Best-effort provider error message."""
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "")[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return str(body)[:200]


def _token_count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def _retry_after(resp) -> Optional[float]:
    value = resp.headers.get("retry-after")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None
