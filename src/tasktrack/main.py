"""FastAPI application factory.

Learn: App factory pattern: create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (logging, optional table
creation, engine disposal). Middleware, CORS, error handlers and routers
are all registered here; each concern lives in its own module.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasktrack import __version__
from tasktrack.api import api_router
from tasktrack.config import settings
from tasktrack.errors import register_error_handlers
from tasktrack.middleware.request_id import RequestIdMiddleware
from tasktrack.observability import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` at shutdown.
    """
    from tasktrack.db.engine import engine
    from tasktrack.db.models import Base

    configure_logging(settings.log_level, json_logs=settings.log_json)
    logger.info(
        "tasktrack.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.auto_create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("tasktrack.tables_synced")

    yield

    logger.info("tasktrack.shutdown")
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="tasktrack",
        description="Multi-tenant task tracking API",
        version=__version__,
        lifespan=lifespan,
    )

    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": "tasktrack API is running", "version": __version__}

    app.include_router(api_router)
    return app


# Default app instance (used by uvicorn: tasktrack.main:app)
app = create_app()
