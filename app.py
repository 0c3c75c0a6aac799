"""
AskJunior – legal question API back-end

Endpoints
─────────
GET  /health          → {"status": "ok"}
POST /api/ask         → structured answer to a legal question
"""

# SPDX-License-Identifier: AGPL-3.0-only

import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from counsel.config import AssistantConfig          # noqa: E402  (reads env after .env)
from counsel.endpoints import register_ask_endpoints  # noqa: E402
from counsel.service import LegalAssistantService     # noqa: E402


def create_app(service: LegalAssistantService = None, settings: AssistantConfig = None) -> Flask:
    """Build the Flask app; fails fast when the Anthropic key is missing."""
    settings = settings or AssistantConfig()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)

    @app.get("/health")
    def health():
        """Used by the front-end (and uptime checks) to verify API is alive."""
        return jsonify(status="ok"), 200

    register_ask_endpoints(app, service or LegalAssistantService(settings))
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
