# SPDX-License-Identifier: AGPL-3.0-only

"""
Error taxonomy shared by the LLM client and the legal assistant.

Every failure the assistant can surface is an ``AssistantError`` subclass
carrying an ``error_type`` slug and the HTTP status the web layer should use.
"""

from typing import List, Optional


class AssistantError(Exception):
    """Base class for all assistant failures."""

    error_type = "assistant_error"
    http_status = 500
    retryable = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "error_type": self.error_type}


class ConfigurationError(AssistantError):
    """Required configuration (the provider credential) is missing."""

    error_type = "configuration_error"
    http_status = 500
    retryable = False


# Provider failures

class ProviderError(AssistantError):
    """The provider answered with an unexpected status."""

    error_type = "provider_error"
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ProviderError):
    error_type = "authentication_error"
    http_status = 502
    retryable = False


class RateLimitError(ProviderError):
    error_type = "rate_limit_error"
    http_status = 429

    def __init__(self, message: str, status_code: Optional[int] = 429, retry_after: Optional[float] = None):
        super().__init__(message, status_code)
        self.retry_after = retry_after


class ServiceUnavailableError(ProviderError):
    """Provider-side (5xx), timeout or connection failure."""

    error_type = "service_unavailable"
    http_status = 503


class EmptyResponseError(ProviderError):
    error_type = "empty_response"


class UnexpectedContentError(ProviderError):
    error_type = "unexpected_content"


# Reply handling failures

class ExtractionError(AssistantError):
    """JSON could not be obtained from the model reply."""

    error_type = "extraction_error"
    http_status = 502


class JsonNotFoundError(ExtractionError):
    error_type = "json_not_found"


class JsonParseError(ExtractionError):
    error_type = "json_parse_error"

    def __init__(self, message: str, preview: str = ""):
        super().__init__(message)
        self.preview = preview


class ResponseValidationError(AssistantError):
    """Strict validation rejected the parsed answer."""

    error_type = "validation_error"
    http_status = 502

    def __init__(self, violations: List[str]):
        super().__init__("Response failed validation: " + "; ".join(violations))
        self.violations = list(violations)


class RetriesExhaustedError(AssistantError):
    """Every attempt failed; wraps the last underlying error."""

    error_type = "retries_exhausted"
    retryable = False

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        detail = str(last_error) if last_error else "Unknown error"
        super().__init__(f"Claude API failed after {attempts} attempts: {detail}")
        self.attempts = attempts
        self.last_error = last_error
        if isinstance(last_error, AssistantError):
            self.http_status = last_error.http_status
        else:
            self.http_status = 502

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["attempts"] = self.attempts
        if isinstance(self.last_error, AssistantError):
            out["last_error_type"] = self.last_error.error_type
        return out
