"""
Main Application - Main Layer

This module serves as the entry point for the FastAPI application.
It initializes the container, creates the FastAPI app, and includes
the API routers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.domain.entities.errors import DomainError, GraphConfigurationError
from src.main.config import get_settings
from src.main.container import app_lifespan, init_container
from src.presentation.controllers import graphs_router, system_router
from src.shared import configure_logging, get_logger, update_logging_from_settings

# Bootstrap logging from LOG_* variables so settings loading is already logged
configure_logging()

settings = get_settings()

update_logging_from_settings(settings)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the engine on startup and dispose of its timers on shutdown."""
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("app.starting")

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("app.stopped")


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if isinstance(exc, GraphConfigurationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message},
        )
    logger.error(
        "app.request.domain_error",
        path=request.url.path,
        error=exc.message,
        details=exc.details,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = get_settings()

    init_container(settings)

    app = FastAPI(
        title=settings.service.title,
        description=settings.service.description,
        version=settings.service.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DomainError, _domain_error_handler)

    app.include_router(graphs_router)
    app.include_router(system_router)

    return app


app = create_app()
