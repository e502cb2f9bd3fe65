"""
FastAPI application for the auto quote service.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from autoquote.core.config import AppConfig, load_config
from autoquote.core.container import build_container
from autoquote.repositories.db_pool import StorageUnavailableError
from autoquote.services.quote_service import QuoteNotFoundError
from autoquote.api.routes import API_VERSION, router


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the application. Storage is opened on startup and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_config = config or load_config()
        configure_logging(app_config.logging.level)
        logger.info("Starting Auto Quote Service...")

        container = build_container(app_config)
        removed = container.audit_repo.cleanup_old_logs(app_config.logging.retention_days)
        if removed:
            logger.info(f"Cleaned old audit logs: {removed}")
        app.state.container = container

        yield

        logger.info("Shutting down Auto Quote Service...")
        container.close()

    app = FastAPI(
        title="Auto Quote Service API",
        description="Quotes six months of auto insurance from the driver's age and tracks earnings.",
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    @app.exception_handler(ValueError)
    async def invalid_input_handler(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(QuoteNotFoundError)
    async def not_found_handler(request: Request, exc: QuoteNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
        logger.error(f"Storage unavailable on {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Quote storage is unavailable."})

    app.include_router(router)
    return app


app = create_app()
