"""
Entrypoint for the FastAPI application.

Creates the app, attaches middleware and error handlers and includes the
routers.  The badge router matches every path, so it is included last.
This module is intended to be invoked by an ASGI server (e.g. uvicorn).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import settings
from .deps import close_badge_service
from .errors import register_exception_handlers
from .logging import configure_logging
from .middleware.correlation import RequestIdMiddleware
from .middleware.metrics import MetricsMiddleware
from .routers import badge as badge_router
from .routers import health as health_router
from .routers import metrics as metrics_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Starting page-view badge service for %s", settings.property_resource)
    try:
        yield
    finally:
        await close_badge_service()
        logger.info("Page-view badge service stopped")


def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Page View Badges", version="0.1.0", lifespan=lifespan)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)
    register_exception_handlers(app)
    app.include_router(health_router.router)
    app.include_router(metrics_router.router)
    app.include_router(badge_router.router)
    return app


app = create_app()
