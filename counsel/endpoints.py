# SPDX-License-Identifier: AGPL-3.0-only

"""
Flask endpoints for the legal assistant.
"""
import logging
from flask import request, jsonify
from marshmallow import ValidationError

from common.errors import AssistantError
from validators import AskRequestSchema
from .service import LegalAssistantService


logger = logging.getLogger(__name__)

ask_schema = AskRequestSchema()


def register_ask_endpoints(app, service: LegalAssistantService = None):
    """
    Register legal assistant endpoints with a Flask app.

    The service is built here when not supplied, so a missing API key stops
    the app at startup rather than on the first request.
    """
    service = service or LegalAssistantService()

    @app.post("/api/ask")
    def ask_legal_question():
        """Answer a legal question with a structured response."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"success": False, "error": "Request body must be a JSON object"}), 400

        try:
            params = ask_schema.load(payload)
        except ValidationError as e:
            return jsonify({"success": False, "error": "Invalid request", "details": e.messages}), 400

        try:
            output = service.process(params["message"].strip(), params.get("document_context") or "")
        except AssistantError as e:
            logger.error("Legal question failed (%s): %s", e.error_type, e)
            body = {"success": False}
            body.update(e.to_dict())
            return jsonify(body), e.http_status

        return jsonify({
            "success": True,
            "data": output["result"],
            "repairs": output["repairs"],
            "metrics": output["metrics"]
        }), 200

    return service
