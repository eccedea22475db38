"""Application factory and top-level wiring.

``create_app`` builds the engine, the shared page cache and the local stores,
hangs them on ``app.state`` for the dependencies in ``deps.services``, and
registers routers, middleware and error handlers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.cache import TTLCache
from .core.config import Settings, get_settings
from .core.errors import (
    LegacyDataError,
    StoreError,
    UnauthenticatedError,
    http_exception_handler,
    legacy_data_handler,
    store_error_handler,
    unauthenticated_handler,
    validation_exception_handler,
)
from .core.logging import configure_logging
from .crud.logs import LogStore
from .db.session import build_engine, build_session_factory, init_models
from .middlewares import RequestIdMiddleware
from .routers import api_logs, api_settings
from .services.app_settings import AppSettingsStore
from .services.local_store import LegacyLogArchive, LocalStore
from .services.timecalc import BreakWindow

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    await init_models(app.state.engine)
    logger.info("app.started", extra={"extra_data": {"database": app.state.engine.url.render_as_string()}})
    try:
        yield
    finally:
        await app.state.engine.dispose()


def create_app(config: Settings | None = None) -> FastAPI:
    cfg = config or get_settings()
    configure_logging(cfg.LOG_LEVEL, service=cfg.APP_NAME)

    app = FastAPI(title=cfg.APP_NAME, lifespan=_lifespan)

    engine = build_engine(cfg.database_url)
    local_store = LocalStore(cfg.local_store_path)
    app.state.settings = cfg
    app.state.engine = engine
    app.state.log_store = LogStore(build_session_factory(engine))
    # One cache per process: every request's repository shares it.
    app.state.log_cache = TTLCache(cfg.LOG_CACHE_TTL_SECONDS)
    app.state.legacy_archive = LegacyLogArchive(local_store)
    app.state.settings_store = AppSettingsStore(local_store, default_target_hours=cfg.DEFAULT_TARGET_HOURS)
    app.state.break_window = BreakWindow.from_clock(cfg.BREAK_START, cfg.BREAK_END)

    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(UnauthenticatedError, unauthenticated_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(LegacyDataError, legacy_data_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(api_logs.router)
    app.include_router(api_settings.router)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    if cfg.METRICS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


app = create_app()

__all__ = ["app", "create_app"]
