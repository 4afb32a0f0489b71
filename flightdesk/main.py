"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .application.use_cases.session_use_cases import DetectProviderUseCase
from .config.dependencies import get_dashboard_context
from .config.settings import settings
from .domain.errors import DashboardError
from .domain.models import ErrorKind
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .presentation.routers import dashboard, flights, funds, session

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.PROVIDER_UNAVAILABLE: 503,
    ErrorKind.AUTHORIZATION_DENIED: 403,
    ErrorKind.CALL_REVERTED: 409,
    ErrorKind.NETWORK_FAILURE: 502,
    ErrorKind.INVALID_INPUT: 422,
}

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _configure_logging() -> None:
    """Stream logs to stdout and rotating files; contract calls get their own file."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("flightdesk.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    contract_log_path = Path(settings.contract_log_file)
    contract_log_path.parent.mkdir(parents=True, exist_ok=True)
    contract_handler = RotatingFileHandler(
        contract_log_path,
        maxBytes=500_000,
        backupCount=5,
        encoding="utf-8",
    )
    contract_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    )
    contract_logger = logging.getLogger("flightdesk.infrastructure.blockchain")
    contract_logger.handlers.clear()
    contract_logger.addHandler(contract_handler)
    contract_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    noisy_loggers = [
        "web3",
        "urllib3",
        "aiohttp",
        "asyncio",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Flight booking dashboard for the FlightManagement contract",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.include_router(session.router)
    app.include_router(dashboard.router)
    app.include_router(flights.router)
    app.include_router(funds.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(DashboardError)
    async def dashboard_error_handler(request, exc: DashboardError):
        return JSONResponse(
            status_code=ERROR_STATUS_CODES.get(exc.kind, 500),
            content={"detail": exc.message, "code": exc.kind.value},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        context = get_dashboard_context()
        await DetectProviderUseCase(context.store, context.session).execute()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "flightdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
