# SPDX-License-Identifier: AGPL-3.0-only

"""
Legal assistant service: coordinates prompt, provider call and normalization.
"""
import logging
import time
from typing import Any, Dict, Optional

from common.errors import AssistantError, RateLimitError, RetriesExhaustedError
from common.llm_client import AnthropicClient
from common.metrics import RequestMetrics
from .config import AssistantConfig, config as default_config
from .models import StructuredAnswer
from .normalizer import extract_json, normalize_answer
from .prompt_pack import build_legal_prompt


logger = logging.getLogger(__name__)


class LegalAssistantService:
    """Answers legal questions with a validated StructuredAnswer."""

    def __init__(self, settings: Optional[AssistantConfig] = None, client: Optional[AnthropicClient] = None):
        """
        Initialize the service.

        Args:
            settings: Configuration, defaults to the global instance
            client: Provider client, built from ``settings`` when omitted

        Raises:
            ConfigurationError: If no client is given and the API key is missing
        """
        self.settings = settings or default_config
        self.client = client or AnthropicClient.from_config(self.settings.get_ai_config())
        retry = self.settings.get_retry_config()
        self.max_attempts = retry["max_attempts"]
        self.rate_limit_backoff = retry["rate_limit_backoff"]
        self.validation_mode = self.settings.validation_mode
        logger.info("Legal assistant ready (model=%s, attempts=%d, validation=%s)",
                    getattr(self.client, "model", "?"), self.max_attempts, self.validation_mode)

    def ask_legal_question(self, user_message: str, document_context: str = "") -> StructuredAnswer:
        """Answer one question; raises an ``AssistantError`` on failure."""
        answer, _ = self._run(user_message, document_context, RequestMetrics())
        return answer

    def process(self, user_message: str, document_context: str = "") -> Dict[str, Any]:
        """
        Answer one question and report how it went.

        Returns:
            {result: {}, repairs: [], metrics: {}}
        """
        metrics = RequestMetrics()
        answer, repairs = self._run(user_message, document_context, metrics)
        return {
            "result": answer.to_dict(),
            "repairs": repairs,
            "metrics": metrics.to_dict()
        }

    def _run(self, user_message: str, document_context: str, metrics: RequestMetrics):
        system_prompt, user_content = build_legal_prompt(
            user_message, document_context, self.settings.max_document_chars
        )
        metrics.mark_stage("prompt_built")
        logger.info("Legal question received: %r", user_message[:100])
        if document_context:
            logger.info("Document context provided (%d chars)", len(document_context))

        last_error: Optional[Exception] = None
        try:
            for attempt in range(1, self.max_attempts + 1):
                metrics.start_attempt()
                try:
                    logger.info("Calling Claude [attempt %d/%d]", attempt, self.max_attempts)
                    reply = self.client.complete(system_prompt, user_content)
                    metrics.add_llm_call(reply.get("tokens", 0))
                    metrics.mark_stage("llm_done")
                    logger.debug("Claude reply (first 300 chars): %s", reply["text"][:300])

                    data = extract_json(reply["text"])
                    metrics.mark_stage("extraction_done")

                    repairs = normalize_answer(data, self.validation_mode)
                    metrics.add_repairs(repairs)
                    answer = StructuredAnswer.from_dict(data)
                    metrics.mark_stage("validation_done")

                    logger.info("Answer ready after %d attempt(s)", attempt)
                    return answer, repairs
                except AssistantError as e:
                    if not e.retryable:
                        metrics.add_error(str(e))
                        logger.error("Non-retryable failure (%s): %s", e.error_type, e)
                        raise
                    last_error = e
                    metrics.add_error(str(e))
                    logger.warning("Attempt %d/%d failed (%s): %s", attempt, self.max_attempts, e.error_type, e)
                    if attempt < self.max_attempts:
                        self._backoff(e)
                except Exception as e:
                    last_error = e
                    metrics.add_error(str(e))
                    logger.warning("Attempt %d/%d failed: %s: %s",
                                   attempt, self.max_attempts, type(e).__name__, e)
                    if attempt < self.max_attempts:
                        self._backoff(e)
        finally:
            metrics.finish()

        logger.error("All %d attempts failed; last error: %s", self.max_attempts, last_error)
        raise RetriesExhaustedError(self.max_attempts, last_error)

    def _backoff(self, error: Exception) -> None:
        if isinstance(error, RateLimitError) and self.rate_limit_backoff > 0:
            logger.info("Rate limited; waiting %.1fs before retry", self.rate_limit_backoff)
            time.sleep(self.rate_limit_backoff)
