"""
Registration, login and user lookup.

ROUTER MAP:
- POST /api/auth/register - Create account, returns {token, user}
- POST /api/auth/login - Exchange credentials for {token, user}
- GET  /api/auth/me - Current user
- GET  /api/users?username=<name> - Resolve a username to a public user (share picker)
"""
from __future__ import annotations

from aiohttp import web

from app.handlers.common import AUTH_SERVICE, current_user_id, read_json

routes = web.RouteTableDef()


@routes.post("/api/auth/register")
async def register(request: web.Request) -> web.Response:
    body = await read_json(request)
    user, token = await request.app[AUTH_SERVICE].register(body.get("username"), body.get("password"))
    return web.json_response({"token": token, "user": user.public()}, status=201)


@routes.post("/api/auth/login")
async def login(request: web.Request) -> web.Response:
    body = await read_json(request)
    user, token = await request.app[AUTH_SERVICE].login(body.get("username"), body.get("password"))
    return web.json_response({"token": token, "user": user.public()})


@routes.get("/api/auth/me")
async def me(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    user = await request.app[AUTH_SERVICE].get_user(user_id)
    return web.json_response(user.public())


@routes.get("/api/users")
async def find_user(request: web.Request) -> web.Response:
    await current_user_id(request)
    user = await request.app[AUTH_SERVICE].find_user(request.query.get("username"))
    return web.json_response(user.public())
