# SPDX-License-Identifier: AGPL-3.0-only

"""
Integration tests for the Flask surface.
"""

import pytest
from unittest.mock import patch

from app import create_app
from common.errors import AuthenticationError, ConfigurationError, RateLimitError, ServiceUnavailableError
from conftest import make_reply


@pytest.fixture
def client(service, settings):
    app = create_app(service=service, settings=settings)
    app.config["TESTING"] = True
    return app.test_client()


class TestAskEndpoint:
    """Test suite for POST /api/ask."""

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok"}

    def test_ask_success(self, client, mock_client, valid_answer, valid_reply_text):
        mock_client.complete.return_value = make_reply(valid_reply_text)

        resp = client.post("/api/ask", json={"message": "My landlord won't return my deposit"})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["data"] == valid_answer
        assert body["repairs"] == []
        assert body["metrics"]["attempts"] == 1

    def test_ask_with_document_context(self, client, mock_client, valid_reply_text):
        mock_client.complete.return_value = make_reply(valid_reply_text)

        resp = client.post("/api/ask", json={"message": "Is this fair?", "documentContext": "Clause 7"})

        assert resp.status_code == 200
        system_prompt, _ = mock_client.complete.call_args[0]
        assert "Clause 7" in system_prompt

    def test_message_is_trimmed(self, client, mock_client, valid_reply_text):
        mock_client.complete.return_value = make_reply(valid_reply_text)

        client.post("/api/ask", json={"message": "  Question?  "})

        _, user_content = mock_client.complete.call_args[0]
        assert user_content == "Question?"

    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   "}, {"message": 12}])
    def test_invalid_message_rejected(self, client, mock_client, body):
        resp = client.post("/api/ask", json=body)

        assert resp.status_code == 400
        payload = resp.get_json()
        assert payload["success"] is False
        assert "message" in payload["details"]
        mock_client.complete.assert_not_called()

    def test_non_json_body_rejected(self, client):
        resp = client.post("/api/ask", data="message=hi", content_type="text/plain")
        assert resp.status_code == 400

    def test_authentication_failure_maps_to_502(self, client, mock_client):
        mock_client.complete.side_effect = AuthenticationError("ANTHROPIC_API_KEY is invalid or expired", 401)

        resp = client.post("/api/ask", json={"message": "Q"})

        assert resp.status_code == 502
        assert resp.get_json()["error_type"] == "authentication_error"

    @patch("counsel.service.time.sleep")
    def test_rate_limit_exhaustion_maps_to_429(self, mock_sleep, client, mock_client):
        mock_client.complete.side_effect = RateLimitError("Anthropic rate limit exceeded")

        resp = client.post("/api/ask", json={"message": "Q"})

        assert resp.status_code == 429
        body = resp.get_json()
        assert body["error_type"] == "retries_exhausted"
        assert body["last_error_type"] == "rate_limit_error"
        assert body["attempts"] == 3

    def test_service_failure_maps_to_503(self, client, mock_client):
        mock_client.complete.side_effect = ServiceUnavailableError("down", 503)

        resp = client.post("/api/ask", json={"message": "Q"})

        assert resp.status_code == 503
        assert "after 3 attempts" in resp.get_json()["error"]

    def test_extraction_failure_maps_to_502(self, client, mock_client):
        mock_client.complete.return_value = make_reply("plain prose, no JSON")

        resp = client.post("/api/ask", json={"message": "Q"})

        assert resp.status_code == 502
        assert resp.get_json()["last_error_type"] == "json_not_found"


def test_app_requires_api_key(settings):
    with pytest.raises(ConfigurationError):
        create_app(settings=settings.model_copy(update={"anthropic_api_key": None}))
