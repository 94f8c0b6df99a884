"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from address_resolver.core.config import get_settings
from address_resolver.core.logging import setup_logging
from address_resolver.services.address_service import get_address_service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Configure logging and report which backends are usable at startup."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)

    service = get_address_service()
    if not service.is_secondary_configured():
        logger.info("LocationIQ API key not set; geocoding runs on Nominatim only")
    if not service.is_usps_configured():
        logger.warning("USPS credentials not set; address validation is disabled")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Address Resolver",
        description="Address autocomplete and geocoding with provider failover, plus USPS delivery validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    from address_resolver.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
