"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fixme_advisor import __version__
from fixme_advisor.server.models import HealthResponse
from fixme_advisor.server.routes import ml_router, usage_router
from fixme_advisor.service import AdvisorService
from fixme_advisor.storage.base import EventStoreError
from fixme_advisor.storage.factory import create_store
from fixme_advisor.utils.config import Config
from fixme_advisor.utils.config import get_config as get_server_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    from fixme_advisor.unified_config import get_config

    config = get_config(reload=True)
    store = await create_store(config)
    app.state.service = AdvisorService(store, config)
    logger.info("Advisor bridge using %s store in %s", config.storage, config.data_dir)
    yield
    await app.state.service.close()


def create_app(
    title: str = "fixme-advisor",
    description: str = "Adaptive optimization recommendations with usage gating",
    cors_origins: list[str] | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title
        description: API description
        cors_origins: Allowed CORS origins (default: from FIXME_ADVISOR_CORS_ORIGINS)

    Returns:
        Configured FastAPI application
    """
    server_config = get_server_config()
    if cors_origins is not None:
        server_config = Config(debug=server_config.debug, cors_origins=cors_origins)

    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
        debug=server_config.debug,
    )

    is_wildcard = server_config.cors_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=server_config.exact_origins,
        allow_origin_regex=server_config.origin_regex,
        allow_credentials=not is_wildcard,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Override service dependency using the shared module
    from fixme_advisor.server.dependencies import get_service as shared_get_service

    async def get_service() -> AdvisorService:
        service: AdvisorService = app.state.service
        return service

    app.dependency_overrides[shared_get_service] = get_service

    @app.exception_handler(EventStoreError)
    async def store_error_handler(request: Request, exc: EventStoreError) -> JSONResponse:
        logger.error("Event store failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    app.include_router(ml_router)
    app.include_router(usage_router)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    return app
