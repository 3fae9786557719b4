"""Little Lemon Menu Cache API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MenuCacheError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - CacheRuntime built once in the lifespan, stored on app.state, closed on shutdown
    - The initial sync is triggered on startup and never blocks it

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - app.state.runtime over a module-level singleton: tests install their own runtime
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from littlelemon import __version__
from littlelemon.api.error_handlers import register_error_handlers
from littlelemon.api.routes import health, menu, sync
from littlelemon.config import get_settings
from littlelemon.infrastructure.observability import setup_logging
from littlelemon.infrastructure.runtime import CacheRuntime

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    runtime = CacheRuntime.from_settings(settings)
    await runtime.start()
    app.state.runtime = runtime
    logger.info(
        "Little Lemon menu cache started",
        extra={"item_count": len(runtime.store.snapshot)},
    )
    yield
    logger.info("Little Lemon menu cache shutting down")
    app.state.runtime = None
    await runtime.close()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Little Lemon Menu Cache", version=__version__, lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(menu.router)
    app.include_router(sync.router)

    register_error_handlers(app)
    return app


app = create_app()
