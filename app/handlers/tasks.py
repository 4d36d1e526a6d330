"""
Task CRUD and sharing.

ROUTER MAP:
- GET    /api/tasks[?status=<status>] - Caller's own tasks, newest first
- GET    /api/tasks/shared - Tasks shared with the caller
- POST   /api/tasks - Create task
- GET    /api/tasks/{task_id} - Owner or shared user
- PUT    /api/tasks/{task_id} - Owner only, partial update
- DELETE /api/tasks/{task_id} - Owner only
- PUT    /api/tasks/{task_id}/share - Owner only, body {userIdToShare}
- DELETE /api/tasks/{task_id}/share/{user_id} - Owner only

/api/tasks/shared is declared before /api/tasks/{task_id} so it is matched first.
"""
from __future__ import annotations

from aiohttp import web

from app.handlers.common import TASK_SERVICE, current_user_id, read_json

routes = web.RouteTableDef()


@routes.get("/api/tasks")
async def list_tasks(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    tasks = await request.app[TASK_SERVICE].list_tasks(user_id, status=request.query.get("status"))
    return web.json_response([t.to_dict() for t in tasks])


@routes.get("/api/tasks/shared")
async def list_shared(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    tasks = await request.app[TASK_SERVICE].list_shared(user_id)
    return web.json_response([t.to_dict() for t in tasks])


@routes.post("/api/tasks")
async def create_task(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    body = await read_json(request)
    task = await request.app[TASK_SERVICE].create_task(user_id, body)
    return web.json_response(task.to_dict(), status=201)


@routes.get("/api/tasks/{task_id}")
async def get_task(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    task = await request.app[TASK_SERVICE].get_task(user_id, request.match_info["task_id"])
    return web.json_response(task.to_dict())


@routes.put("/api/tasks/{task_id}")
async def update_task(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    body = await read_json(request)
    task = await request.app[TASK_SERVICE].update_task(user_id, request.match_info["task_id"], body)
    return web.json_response(task.to_dict())


@routes.delete("/api/tasks/{task_id}")
async def delete_task(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    await request.app[TASK_SERVICE].delete_task(user_id, request.match_info["task_id"])
    return web.json_response({"message": "Task deleted"})


@routes.put("/api/tasks/{task_id}/share")
async def share_task(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    body = await read_json(request)
    result = await request.app[TASK_SERVICE].share_task(
        user_id, request.match_info["task_id"], body.get("userIdToShare")
    )
    return web.json_response(result.task.to_dict())


@routes.delete("/api/tasks/{task_id}/share/{user_id}")
async def unshare_task(request: web.Request) -> web.Response:
    user_id = await current_user_id(request)
    task = await request.app[TASK_SERVICE].unshare_task(
        user_id, request.match_info["task_id"], request.match_info["user_id"]
    )
    return web.json_response(task.to_dict())
