"""HTTP boundary: ``POST /chat-ai`` in, one composed reply out.

Request body ``{"content": str, "model": mode}``.  Success is ``200
{"response": str}``; failures are ``{"error": true, "message": str}`` with 400
for a malformed request and 500 when the reply could not be composed.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from aiohttp import web

from src.chat.credentials import CredentialStore, EnvCredentialStore
from src.chat.orchestrator import (
    EMPTY_PROMPT_MESSAGE,
    ConfigurationError,
    Mode,
    Orchestrator,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, x-user-id, apikey, content-type",
}

# Signed-in user id; x-client-info carries the client library name, not a user
USER_ID_HEADER = "x-user-id"

ORCHESTRATOR_KEY = web.AppKey("orchestrator", Orchestrator)
CREDENTIALS_KEY = web.AppKey("credentials", CredentialStore)


def _error(message: str, status: int) -> web.Response:
    return web.json_response(
        {"error": True, "message": message}, status=status, headers=CORS_HEADERS
    )


async def handle_preflight(request: web.Request) -> web.Response:
    return web.Response(headers=CORS_HEADERS)


async def handle_chat(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error("Request body must be JSON", 400)
    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", 400)

    content = body.get("content")
    if not isinstance(content, str) or not content.strip():
        return _error(EMPTY_PROMPT_MESSAGE, 400)
    try:
        mode = Mode.parse(body.get("model"))
    except ConfigurationError as exc:
        return _error(str(exc), 400)

    try:
        user_id: Optional[str] = request.headers.get(USER_ID_HEADER)
        credentials = request.app[CREDENTIALS_KEY].get_credentials(user_id)
        reply = await request.app[ORCHESTRATOR_KEY].compose(content, mode, credentials)
    except Exception as exc:
        logger.exception("Error in chat handler")
        return _error(str(exc) or "An unknown error occurred", 500)

    if not reply.ok:
        return _error(reply.error, 500)
    return web.json_response(reply.to_payload(), headers=CORS_HEADERS)


def create_app(
    orchestrator: Optional[Orchestrator] = None,
    store: Optional[CredentialStore] = None,
) -> web.Application:
    """Build the aiohttp application; collaborators default to the real ones."""
    app = web.Application()
    app[ORCHESTRATOR_KEY] = orchestrator if orchestrator is not None else Orchestrator()
    app[CREDENTIALS_KEY] = store if store is not None else EnvCredentialStore()
    app.router.add_post("/chat-ai", handle_chat)
    app.router.add_route("OPTIONS", "/chat-ai", handle_preflight)
    return app
