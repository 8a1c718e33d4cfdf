"""Flask entry point for the company research assistant."""

from __future__ import annotations

import logging
import sys
from io import BytesIO
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, send_file
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Settings, get_settings
from core.conversation_store import ConversationStore
from core.errors import ConfigurationError, UpstreamError, ValidationError
from core.models import PlanDocument
from core.pipeline import GenerationPipeline
from llm.client import LLMClient
from pdf.generator import export_filename, generate_pdf_from_account_plan

logger = logging.getLogger(__name__)


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _text(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    value = str(value)
    return value or None


def _history(payload: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    history = payload.get("history")
    if history is None:
        return None
    if not isinstance(history, list):
        raise ValidationError("History must be a list of messages")
    return [item for item in history if isinstance(item, dict)]


def build_pipeline(settings: Settings) -> GenerationPipeline:
    """Wire the configured provider into a pipeline; raises ConfigurationError."""

    llm = LLMClient(
        provider=settings.llm_provider,
        api_key=settings.api_key,
        openai_model=settings.openai_model,
        gemini_model=settings.gemini_model,
    )
    logger.info("Using %s (%s)", llm.provider, llm.model_name)
    return GenerationPipeline(llm, settings.profiles())


def create_app(
    settings: Optional[Settings] = None,
    pipeline: Optional[GenerationPipeline] = None,
    store: Optional[ConversationStore] = None,
) -> Flask:
    settings = settings or get_settings()
    pipeline = pipeline or build_pipeline(settings)
    store = store if store is not None else ConversationStore(max_conversations=settings.conversation_limit)

    app = Flask(__name__)
    app.json.sort_keys = False
    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})
    app.extensions["pipeline"] = pipeline
    app.extensions["conversation_store"] = store

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(UpstreamError)
    def handle_upstream_error(exc: UpstreamError):
        logger.error("Upstream model error on %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), exc.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("Unhandled error on %s", request.path)
        return jsonify({"error": str(exc)}), 500

    @app.get("/api/health")
    def api_health():
        return jsonify({"status": "ok", "message": "Server is running"})

    @app.get("/api/test-ai")
    def api_test_ai():
        provider = getattr(pipeline.llm, "provider", "unknown")
        model = getattr(pipeline.llm, "model_name", "unknown")
        try:
            reply = pipeline.check_connection()
        except UpstreamError as exc:
            logger.error("%s connection test failed: %s", provider, exc)
            return jsonify({"status": "error", "message": str(exc), "provider": provider}), 500
        return jsonify({"status": "success", "message": reply, "provider": provider, "model": model})

    @app.post("/api/chat")
    def api_chat():
        payload = _json_body()
        message = _text(payload, "message")
        if not message:
            raise ValidationError("Message is required")

        conversation_id = _text(payload, "conversationId")
        history = _history(payload)
        if history is None and conversation_id:
            history = store.get(conversation_id)

        reply = pipeline.chat(conversation_id, message, history or [])
        if conversation_id:
            store.record_exchange(conversation_id, message, reply)
        return jsonify({"message": reply, "role": "assistant"})

    @app.post("/api/research")
    def api_research():
        payload = _json_body()
        company_name = _text(payload, "companyName")
        logger.info("Research request received for: %s", company_name)
        if not company_name:
            raise ValidationError("Company name is required")

        result = pipeline.research_company(company_name)
        logger.info("Research completed for %s", company_name)
        return jsonify(result.to_dict())

    @app.post("/api/generate-plan")
    def api_generate_plan():
        payload = _json_body()
        company_name = _text(payload, "companyName")
        research_data = _text(payload, "researchData")
        if not company_name or not research_data:
            raise ValidationError("Company name and research data are required")

        plan = pipeline.generate_account_plan(company_name, research_data, _text(payload, "additionalContext"))
        return jsonify(plan.to_dict())

    @app.post("/api/update-section")
    def api_update_section():
        payload = _json_body()
        section_name = _text(payload, "sectionName")
        current_content = _text(payload, "currentContent")
        instructions = _text(payload, "updateInstructions")
        if not section_name or not current_content or not instructions:
            raise ValidationError("Section name, current content, and update instructions are required")

        logger.info("Updating section %s", section_name)
        updated_content = pipeline.update_section(section_name, current_content, instructions)
        return jsonify({"updatedContent": updated_content})

    @app.get("/api/conversation/<conversation_id>")
    def api_conversation(conversation_id: str):
        history = [message.to_dict() for message in store.get(conversation_id)]
        return jsonify({"history": history})

    @app.post("/api/export-pdf")
    def api_export_pdf():
        payload = _json_body()
        plan = PlanDocument.from_dict(payload)
        if not plan.full_text.strip() and not plan.is_structured:
            raise ValidationError("An account plan is required to export a PDF")

        company_name = _text(payload, "companyName")
        pdf_bytes = generate_pdf_from_account_plan(plan, company_name)
        return send_file(
            BytesIO(pdf_bytes),
            mimetype="application/pdf",
            as_attachment=True,
            download_name=export_filename(company_name),
        )

    return app


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = create_app(settings)
    except ConfigurationError as exc:
        logger.error("Cannot start: %s", exc)
        sys.exit(1)

    logger.info("Server running on http://localhost:%s (API under /api)", settings.port)
    app.run(port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
