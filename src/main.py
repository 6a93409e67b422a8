"""Reset relay application: app factory, middleware stack and lifespan."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from src.api.middleware.error_handler import (
    error_handler_middleware,
    http_exception_handler,
    validation_exception_handler,
)
from src.api.middleware.latency_logging import latency_logging_middleware
from src.api.middleware.request_size import request_size_limit_middleware
from src.api.routes import avatar, health, password_reset, rooms
from src.core.cloudinary import configure_cloudinary
from src.core.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

ALLOWED_HEADERS = [
    "Content-Type",
    "Authorization",
    "apikey",
    "x-apikey",
    "x-delete-token",
    "x-requested-with",
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure SDKs and report missing feature credentials.

    A missing credential does not stop startup; the endpoints that need it
    answer 500 until it is set.
    """
    settings = get_settings()
    logger.info("%s starting (env=%s, port=%d)", settings.app_name, settings.app_env, settings.port)

    configure_cloudinary()
    for name in settings.missing_credentials():
        logger.warning("%s not configured; endpoints that need it will return 500", name)

    yield
    logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    """Build the relay application.

    Middleware runs outermost first: CORS, body size limit, access log,
    then the error handler wrapping the routes.

    Returns:
        FastAPI: Configured application instance.
    """
    settings = get_settings()
    show_docs = settings.debug

    app = FastAPI(
        title="Reset Relay API",
        description="Password reset, avatar and room presence relay for Supabase",
        version="0.1.0",
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        lifespan=lifespan,
    )

    # add_middleware prepends, so this list is innermost first
    for dispatch in (error_handler_middleware, latency_logging_middleware, request_size_limit_middleware):
        app.add_middleware(BaseHTTPMiddleware, dispatch=dispatch)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=ALLOWED_HEADERS,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    for module in (health, password_reset, avatar, rooms):
        app.include_router(module.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("src.main:app", host=settings.host, port=settings.port, reload=settings.debug)
