"""
Handlers module - combines all route tables.
"""
from __future__ import annotations

from aiohttp import web

from app.handlers import analytics, auth, realtime, tasks

# Order matters only inside a table: tasks.routes declares /api/tasks/shared before /api/tasks/{task_id}
ROUTE_TABLES: list[web.RouteTableDef] = [
    auth.routes,
    tasks.routes,
    analytics.routes,
    realtime.routes,
]


def setup_routes(app: web.Application) -> None:
    for table in ROUTE_TABLES:
        app.router.add_routes(table)


__all__ = ["setup_routes", "ROUTE_TABLES"]
