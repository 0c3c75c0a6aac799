# SPDX-License-Identifier: AGPL-3.0-only

"""
Pytest configuration and fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import json
import os
import pytest
from unittest.mock import Mock

from common.llm_client import AnthropicClient
from counsel.config import AssistantConfig
from counsel.service import LegalAssistantService


# Every environment variable AssistantConfig reads (lookup is case-insensitive).
ASSISTANT_ENV_VARS = tuple(name.upper() for name in AssistantConfig.model_fields)


def clear_assistant_env(monkeypatch):
    """Remove assistant settings from os.environ, including values loaded from .env."""
    for name in list(os.environ):
        if name.upper() in ASSISTANT_ENV_VARS:
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    clear_assistant_env(monkeypatch)


@pytest.fixture
def settings():
    """Configuration with a dummy key and the default retry budget."""
    return AssistantConfig(
        anthropic_api_key="test-key",
        ai_max_retries=2,
        rate_limit_backoff_seconds=2.0,
        validation_mode="repair",
        max_document_chars=10000,
    )


@pytest.fixture
def strict_settings(settings):
    return settings.model_copy(update={"validation_mode": "strict"})


@pytest.fixture
def valid_answer():
    """The deposit-dispute answer used across the suite."""
    return {
        "matterSummary": "Tenant deposit dispute",
        "incidentType": "Property",
        "clarifyingQuestions": [],
        "conditionalGuidance": "Based on the information available so far, contact your landlord in writing.",
        "legalPathways": ["Send a written demand letter", "File in small claims"],
        "flowchart": "flowchart TD\n A-->B",
        "disclaimer": "Not legal advice."
    }


@pytest.fixture
def valid_reply_text(valid_answer):
    return json.dumps(valid_answer)


@pytest.fixture
def legacy_reply_text():
    return '{"summary":"ok","steps":["Step 1: notify","Step 2: file"]}'


def make_reply(text, tokens=42):
    """Shape of AnthropicClient.complete() output."""
    return {"text": text, "tokens": tokens, "stop_reason": "end_turn"}


@pytest.fixture
def mock_client():
    """Mock provider client; set ``complete.return_value``/``side_effect`` per test."""
    client = Mock(spec=AnthropicClient)
    client.model = "claude-test"
    return client


@pytest.fixture
def service(settings, mock_client):
    return LegalAssistantService(settings, client=mock_client)


@pytest.fixture
def strict_service(strict_settings, mock_client):
    return LegalAssistantService(strict_settings, client=mock_client)


def make_http_response(status_code=200, body=None, headers=None, text=""):
    """Mock of requests.Response."""
    resp = Mock()
    resp.status_code = status_code
    resp.headers = headers or {}
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body if body is not None else {}
    return resp


# Pytest configuration
def pytest_collection_modifyitems(config, items):
    """Modify test collection."""
    for item in items:
        if "integration" in item.name or "endpoint" in item.nodeid:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
