"""
Main FastAPI application entry point.
Configures logging, exception handlers, telemetry, and routers.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tymout.api.dependencies import get_feedback_repository, get_service_client
from tymout.api.routers import (
    discovery_router,
    feedback_router,
    health_router,
    recommendations_router,
    search_router,
)
from tymout.config import get_settings
from tymout.config.logging import configure_logging
from tymout.core.exceptions import AppException
from tymout.core.telemetry import setup_telemetry
from tymout.repositories.mongo import MongoFeedbackRepository


# =============================================================================
# Lifespan (Startup/Shutdown)
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    logger = logging.getLogger(__name__)
    settings = get_settings()

    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Downstream services: {settings.service_urls}")
    logger.info(f"Feedback store: {settings.FEEDBACK_STORE}")

    repository = get_feedback_repository()
    if isinstance(repository, MongoFeedbackRepository):
        await repository.ensure_indexes()

    yield

    logger.info("Shutting down application")
    await get_service_client().aclose()
    get_service_client.cache_clear()
    if isinstance(repository, MongoFeedbackRepository):
        await repository.close()


# =============================================================================
# Exception Handlers
# =============================================================================


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """Handle custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report invalid query, path or body parameters as 400."""
    messages = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "; ".join(messages),
            "code": "VALIDATION_ERROR",
        },
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions - return generic error."""
    logger = logging.getLogger(__name__)
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        },
    )


# =============================================================================
# Application Factory
# =============================================================================


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    configure_logging(debug=settings.DEBUG)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
        Tymout Discovery API

        Aggregates and ranks events and circles from the Tymout event
        service, and stores user feedback.

        ## Features
        - Discovery by city, category, trend and interests
        - Filtered search with autocomplete
        - Personalized, similar, featured and popular recommendations
        - Feedback with per-user-per-target uniqueness
        - Observability: JSON logs, Prometheus, OpenTelemetry
        """,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health_router)
    app.include_router(discovery_router)
    app.include_router(search_router)
    app.include_router(recommendations_router)
    app.include_router(feedback_router)

    setup_telemetry(app)

    return app


app = create_app()


# =============================================================================
# Development Entry Point
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tymout.main:app",
        host="0.0.0.0",
        port=3003,
        reload=True,
    )
