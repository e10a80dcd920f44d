"""storegate - Store Sales API Proxy Main Application."""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from storegate import __version__
from storegate.api.router import api_router
from storegate.config import Settings, get_settings
from storegate.core.handlers import register_exception_handlers
from storegate.services.health_gate import BackendHealthGate
from storegate.services.store_api import StoreApiClient
from storegate.utils.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings

    setup_logging(settings.log_level, json_logs=settings.json_logs)
    logger.info(f"Starting storegate in {settings.env} mode")

    if settings.is_backend_configured:
        logger.info("Proxying store backend", api_url=settings.api_url)
    else:
        logger.warning("STORE_API_URL is not set; proxy routes will answer 500")

    # Clients may be injected before startup (tests)
    if not hasattr(app.state, "health_gate"):
        app.state.health_gate = BackendHealthGate(settings)
    if not hasattr(app.state, "store_api"):
        app.state.store_api = StoreApiClient(settings)

    logger.info("storegate started successfully")

    yield

    logger.info("Shutting down storegate...")

    await app.state.health_gate.aclose()
    await app.state.store_api.aclose()

    logger.info("storegate shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="storegate API",
        description="Store sales proxy with backend health gating",
        version=__version__,
        docs_url=f"{settings.api_prefix}/docs" if settings.env != "production" else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.env != "production" else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.env != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        bind_request_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


def main() -> None:
    """Main entry point for running the application."""
    settings = get_settings()

    uvicorn.run(
        "storegate.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.env == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
