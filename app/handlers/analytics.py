"""
Analytics over the caller's own tasks.

ROUTER MAP:
- GET /api/analytics/overview - {status: count}, zero-count statuses omitted
- GET /api/analytics/trends - [{date, count}] for the trailing 7 days, ascending
"""
from __future__ import annotations

from aiohttp import web

from app.handlers.common import ANALYTICS_SERVICE, current_user_id

routes = web.RouteTableDef()


@routes.get("/api/analytics/overview")
async def overview(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    return web.json_response(await request.app[ANALYTICS_SERVICE].overview(user_id))


@routes.get("/api/analytics/trends")
async def trends(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    return web.json_response(await request.app[ANALYTICS_SERVICE].trends(user_id))
