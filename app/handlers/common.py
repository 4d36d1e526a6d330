"""
Shared keys, middleware and helpers for HTTP handlers.

This module contains:
- AppKeys for services stored on the aiohttp Application
- error_middleware(): maps domain errors to JSON responses
- current_user_id(): resolves the bearer token of a request
- read_json(): parses a JSON object body

ROUTER MAP:
- This module does not define routes, but provides utilities used by all handlers.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from aiohttp import web

from app.config import Settings
from app.domain.analytics.service import AnalyticsService
from app.domain.auth.service import AuthService
from app.domain.common.errors import AuthError, DomainError, ValidationError
from app.domain.tasks.service import TaskService
from app.infra.db.connection import Database
from app.realtime.registry import ChannelRegistry

logger = logging.getLogger(__name__)

SETTINGS = web.AppKey("settings", Settings)
DB = web.AppKey("db", Database)
AUTH_SERVICE = web.AppKey("auth_service", AuthService)
TASK_SERVICE = web.AppKey("task_service", TaskService)
ANALYTICS_SERVICE = web.AppKey("analytics_service", AnalyticsService)
CHANNELS = web.AppKey("channels", ChannelRegistry)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def json_error(status: int, message: str) -> web.Response:
    return web.json_response({"message": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except DomainError as e:
        return json_error(e.status, e.message)
    except web.HTTPException:
        raise
    except Exception:
        # store/infrastructure failure: generic 500, no retry
        logger.error(f"Unhandled error: {request.method} {request.path}", exc_info=True)
        return json_error(500, "Server error")


def bearer_token(request: web.Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


async def current_user_id(request: web.Request, allow_query_token: bool = False) -> str:
    token = bearer_token(request)
    if token is None and allow_query_token:
        # browsers cannot set headers on WebSocket upgrades
        token = request.query.get("token") or None
    if token is None:
        raise AuthError("Missing bearer token.")
    return await request.app[AUTH_SERVICE].authenticate(token)


async def read_json(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        # JSONDecodeError and UnicodeDecodeError (body is not UTF-8) are both ValueErrors
        raise ValidationError("Request body must be valid JSON.")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body
