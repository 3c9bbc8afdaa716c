# === FILE: kb_scout/web.py ===
"""
HTTP surface of KBScout (aiohttp.web).

Endpoints:
  GET  /api/health            liveness
  POST /api/search            {"query"} -> {"results": [...]}
  POST /api/scrape            run one crawl pass now
  GET  /api/knowledge/stats   document count and last crawl time
  POST /api/chat              {"message", "conversation"} -> {"response", "sources"}

The crawl scheduler is started with the application and cancelled on cleanup.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from aiohttp import web

from kb_scout.assistant import Assistant
from kb_scout.engine import Engine
from kb_scout.errors import CompletionError, PassFailure
from kb_scout.logger import logger

__all__ = ["create_app", "ENGINE_KEY", "ASSISTANT_KEY"]

ENGINE_KEY = web.AppKey("engine", Engine)
ASSISTANT_KEY = web.AppKey("assistant", Assistant)


async def _json_body(request: web.Request) -> Dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        data = await request.json()
    except json.JSONDecodeError as exc:
        raise web.HTTPBadRequest(
            text=json.dumps({"error": f"Invalid JSON: {exc}"}), content_type="application/json"
        ) from exc
    return data if isinstance(data, dict) else {}


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "OK"})


async def search(request: web.Request) -> web.Response:
    engine = request.app[ENGINE_KEY]
    query = (await _json_body(request)).get("query")
    if not query or not isinstance(query, str):
        return web.json_response({"error": "Query is required"}, status=400)
    results = engine.search(query, engine.config.search_limit)
    return web.json_response({"results": [hit.as_dict() for hit in results]})


async def scrape(request: web.Request) -> web.Response:
    engine = request.app[ENGINE_KEY]
    prior = len(engine.store)
    try:
        report = await engine.crawl()
    except PassFailure as exc:
        # documents the failed pass already wrote stay stored but are not counted
        return web.json_response(
            {"error": "Scraping failed", "details": str(exc), "total": prior}, status=500
        )
    return web.json_response({"message": "Scraping completed", "total": report.total})


async def stats(request: web.Request) -> web.Response:
    return web.json_response(request.app[ENGINE_KEY].stats())


async def chat(request: web.Request) -> web.Response:
    assistant = request.app.get(ASSISTANT_KEY)
    if assistant is None:
        return web.json_response({"error": "Chat is not configured"}, status=503)
    body = await _json_body(request)
    message = body.get("message")
    if not message or not isinstance(message, str):
        logger.error("Missing message in request body")
        return web.json_response({"error": "Message is required."}, status=400)
    conversation = body.get("conversation") or []
    if not isinstance(conversation, list):
        return web.json_response({"error": "Conversation must be a list."}, status=400)
    try:
        reply = await assistant.reply(message, conversation)
    except CompletionError as exc:
        logger.error("Completion service error: %s", exc)
        return web.json_response(
            {"error": "Failed to process request with the completion service", "details": str(exc)},
            status=500,
        )
    return web.json_response(reply.as_dict())


def create_app(engine: Engine, assistant: Optional[Assistant] = None) -> web.Application:
    """Build the application; the scheduler lives exactly as long as the app."""
    app = web.Application()
    app[ENGINE_KEY] = engine
    if assistant is not None:
        app[ASSISTANT_KEY] = assistant

    app.router.add_get("/api/health", health)
    app.router.add_post("/api/search", search)
    app.router.add_post("/api/scrape", scrape)
    app.router.add_get("/api/knowledge/stats", stats)
    app.router.add_post("/api/chat", chat)

    async def _start_scheduler(app: web.Application) -> None:
        app[ENGINE_KEY].start()

    async def _stop_scheduler(app: web.Application) -> None:
        await app[ENGINE_KEY].stop()

    app.on_startup.append(_start_scheduler)
    app.on_cleanup.append(_stop_scheduler)
    return app
