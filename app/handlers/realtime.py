"""
WebSocket notification channel.

ROUTER MAP:
- GET /ws?token=<jwt> - Upgrade to a WebSocket (Authorization: Bearer also accepted)

Client -> server messages:
- {"action": "subscribe", "userId": "<own id>"} -> {"type": "subscribed", "userId": ...}
- {"action": "unsubscribe"} -> {"type": "unsubscribed"} (an error when not subscribed)
Server -> client events: {"message": "<text>"}
"""
from __future__ import annotations

import json
import logging
from typing import Any

from aiohttp import WSMsgType, web

from app.constants import WS_HEARTBEAT_SECONDS
from app.handlers.common import CHANNELS, current_user_id
from app.realtime.registry import ChannelRegistry

logger = logging.getLogger(__name__)

routes = web.RouteTableDef()


def _error(message: str) -> dict[str, Any]:
    return {"type": "error", "message": message}


@routes.get("/ws")
async def channel(request: web.Request) -> web.WebSocketResponse:
    # authenticate before the upgrade so a bad token is a plain 401
    user_id = await current_user_id(request, allow_query_token=True)
    registry = request.app[CHANNELS]

    ws = web.WebSocketResponse(heartbeat=WS_HEARTBEAT_SECONDS)
    await ws.prepare(request)
    registry.attach(ws)
    logger.info("Channel opened: user_id=%s", user_id)

    try:
        async for msg in ws:
            if msg.type == WSMsgType.TEXT:
                await _handle_text(ws, registry, user_id, msg.data)
            elif msg.type == WSMsgType.ERROR:
                logger.warning(f"Channel error: user_id={user_id}, error={ws.exception()}")
    finally:
        registry.remove(user_id, ws)
        registry.detach(ws)
        logger.info("Channel closed: user_id=%s", user_id)

    return ws


async def _handle_text(ws: web.WebSocketResponse, registry: ChannelRegistry, user_id: str, data: str) -> None:
    try:
        message = json.loads(data)
    except json.JSONDecodeError:
        await ws.send_json(_error("Messages must be JSON."))
        return
    if not isinstance(message, dict):
        await ws.send_json(_error("Messages must be JSON objects."))
        return

    action = message.get("action")
    if action == "subscribe":
        topic = message.get("userId", user_id)
        # a client may only listen on its own topic
        if topic != user_id:
            await ws.send_json(_error("Cannot subscribe to another user's channel."))
            return
        if registry.is_subscribed(user_id, ws):
            logger.debug("Duplicate subscribe ignored: user_id=%s", user_id)
        else:
            registry.add(user_id, ws)
        await ws.send_json({"type": "subscribed", "userId": user_id})
    elif action == "unsubscribe":
        if not registry.remove(user_id, ws):
            await ws.send_json(_error("Not subscribed."))
            return
        await ws.send_json({"type": "unsubscribed"})
    elif action == "ping":
        await ws.send_json({"type": "pong"})
    else:
        await ws.send_json(_error(f"Unknown action: {action!r}"))
