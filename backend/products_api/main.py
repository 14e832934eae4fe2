"""FastAPI application bootstrap."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from products_api.api.routers import health, products
from products_api.core.config import Settings, get_settings
from products_api.core.errors import register_error_handlers
from products_api.core.logging import configure_logging
from products_api.db.session import Database

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{duration_ms:.1f}ms"
        )
        return response


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Instantiate the FastAPI app with its database and routers."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if database is None:
        database = Database(settings.database_url, echo=settings.database_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.init()
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="REST API with FastAPI and SQLAlchemy",
        docs_url=settings.docs_url,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "products", "description": "API operations related to products"},
        ],
    )
    app.state.database = database
    app.state.settings = settings

    logger.info(f"[CORS] Allowed origins: {settings.cors_origins}")

    # Configure CORS for the single frontend origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it wraps CORS and sees rejected preflights too
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router, prefix="/api/products", tags=["products"])

    return app


app = create_app()
