from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from aiohttp import web

from app.config import Settings, load_settings
from app.domain.analytics.service import AnalyticsService
from app.domain.auth.ports import PasswordHasher
from app.domain.auth.service import AuthService
from app.domain.common.ports import Clock
from app.domain.common.time import to_iso
from app.domain.tasks.service import TaskService
from app.handlers import setup_routes
from app.handlers.common import (
    ANALYTICS_SERVICE,
    AUTH_SERVICE,
    CHANNELS,
    DB,
    SETTINGS,
    TASK_SERVICE,
    error_middleware,
)
from app.infra.clock.system_clock import SystemClock
from app.infra.db.connection import Database
from app.infra.db.repo.analytics_sqlite import AnalyticsSqliteRepo
from app.infra.db.repo.tasks_sqlite import TasksSqliteRepo
from app.infra.db.repo.users_sqlite import UsersSqliteRepo
from app.infra.db.schema_version import apply_migrations
from app.infra.ids.uuid_gen import UuidGenerator
from app.infra.security.passwords import PasslibHasher
from app.infra.security.tokens import JwtSigner
from app.realtime.registry import ChannelRegistry

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


async def index(request: web.Request) -> web.FileResponse:
    return web.FileResponse(STATIC_DIR / "index.html")


def create_app(
    settings: Settings,
    clock: Optional[Clock] = None,
    hasher: Optional[PasswordHasher] = None,
) -> web.Application:
    """Composition root: wire repos, services and the channel registry into one Application."""
    clock = clock or SystemClock()
    ids = UuidGenerator()

    db = Database(str(settings.db_path))
    users_repo = UsersSqliteRepo(db)
    channels = ChannelRegistry()

    app = web.Application(middlewares=[error_middleware])
    app[SETTINGS] = settings
    app[DB] = db
    app[CHANNELS] = channels
    app[AUTH_SERVICE] = AuthService(
        users=users_repo,
        hasher=hasher or PasslibHasher(),
        tokens=JwtSigner(settings.jwt_secret, settings.token_ttl_minutes),
        clock=clock,
        ids=ids,
    )
    app[TASK_SERVICE] = TaskService(
        repo=TasksSqliteRepo(db),
        users=users_repo,
        notifier=channels,
        clock=clock,
        ids=ids,
    )
    app[ANALYTICS_SERVICE] = AnalyticsService(repo=AnalyticsSqliteRepo(db), clock=clock)

    async def on_startup(app: web.Application) -> None:
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
        applied = await apply_migrations(db, now_iso=to_iso(clock.now()))
        logger.info(f"Database ready: path={settings.db_path}, migrations_applied={applied}")

    async def on_shutdown(app: web.Application) -> None:
        await channels.close_all()

    app.on_startup.append(on_startup)
    app.on_shutdown.append(on_shutdown)

    setup_routes(app)
    app.router.add_get("/", index)
    app.router.add_static("/static/", STATIC_DIR)
    return app


def main() -> None:
    """
    Entry point for the HTTP + WebSocket server.

    Required environment: DB_PATH, JWT_SECRET (see app/config.py).
    """
    pid = os.getpid()

    # settings first: LOG_LEVEL comes from the environment
    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s'
    )

    logger.info("=" * 60)
    logger.info(f"Server starting - PID: {pid}")
    logger.info("=" * 60)

    try:
        app = create_app(settings)
        logger.info(f"Listening on http://{settings.host}:{settings.port}")
        web.run_app(app, host=settings.host, port=settings.port, print=None)
    except Exception:
        logger.error(f"Server crashed - PID: {pid}", exc_info=True)
        raise
    finally:
        logger.info(f"Server shutdown complete - PID: {pid}")


if __name__ == "__main__":
    main()
