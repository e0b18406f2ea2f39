from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .commands import open_state
from .errors import AppError, PoolError, TodoNotFoundError, ValidationError
from .logging_setup import setup_logging, shutdown_logging
from .routers import brokers as brokers_router
from .routers import logs as logs_router
from .routers import stats as stats_router
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "Create, list, get, update, delete and search Todo items."},
    {"name": "brokers", "description": "Distinct broker tags in use."},
    {"name": "logs", "description": "Log forwarding from the UI."},
    {"name": "stats", "description": "Statistics and completed-work reports."},
]


def _status_for(exc: AppError) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, TodoNotFoundError):
        return 404
    if isinstance(exc, PoolError):
        return 503
    return 500


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the command bridge app.

    Startup order: data dir, logging, database pool and migrations. Shutdown
    runs in reverse so the last database messages still reach the log file.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings.logs_dir, level=settings.log_level, console=settings.log_console)
        logger.info("Application starting...")
        logger.info("App data directory: %s", settings.data_dir)
        app.state.sqd = open_state(settings)
        try:
            yield
        finally:
            logger.info("Application shutting down")
            app.state.sqd.close()
            shutdown_logging()

    app = FastAPI(
        title="SQD Assistant",
        description="Local command bridge between the task-tracking UI and its SQLite store.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": exc.errors(),
            },
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Surface command errors as {"error": <kind>, "message": <str(exc)>}."""
        code = _status_for(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=code,
            content={"error": type(exc).__name__, "message": str(exc)},
        )

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the database in use.
        """
        return {"message": "Healthy", "database": settings.database_path}

    app.include_router(todos_router.router)
    app.include_router(brokers_router.router)
    app.include_router(logs_router.router)
    app.include_router(stats_router.router)
    return app
