"""FastAPI application exposing the SMS-to-chat bridge."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from flexsms.audit.logger import AuditLogger
from flexsms.bridge import SmsChatBridge
from flexsms.config import BridgeConfig

logger = logging.getLogger(__name__)

BRIDGE_PATH = "/create-direct-to-task-sms-chat"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "OPTIONS, POST",
    "Access-Control-Allow-Headers": "Content-Type",
}

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = BridgeConfig.from_env()
    audit_logger = (
        AuditLogger.from_env(config.audit_log_path) if config.audit_log_path else None
    )
    return create_app(config, audit_logger)


def create_app(
    config: BridgeConfig,
    audit_logger: AuditLogger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the bridge app; ``transport`` is handed to the platform clients."""
    app = FastAPI(docs_url=None, redoc_url=None)
    bridge = SmsChatBridge.from_config(config, audit_logger=audit_logger, transport=transport)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.options(BRIDGE_PATH)
    async def preflight() -> Response:
        return Response(status_code=204, headers=CORS_HEADERS)

    @app.post(BRIDGE_PATH)
    async def create_direct_to_task_sms_chat(request: Request) -> JSONResponse:
        event = await _read_event(request)
        result = await bridge.start(event)
        return JSONResponse(result.body, status_code=result.status_code, headers=CORS_HEADERS)

    return app


async def _read_event(request: Request) -> dict[str, Any]:
    """Merge query parameters with a JSON or form body; body keys win.

    A body that cannot be parsed contributes nothing, so the request then
    fails field validation.
    """
    event: dict[str, Any] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        event.update({k: v for k, v in form.items() if isinstance(v, str)})
        return event

    body = await request.body()
    if not body:
        return event
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Ignoring request body that is not JSON")
        return event
    if isinstance(payload, dict):
        event.update(payload)
    return event
