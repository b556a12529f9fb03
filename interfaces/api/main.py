"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from application.ports.repositories.blob_record_repository import BlobRecordRepository
from domain.exceptions import InfrastructureError
from infrastructure.config import settings
from infrastructure.di.container import HttpClients
from infrastructure.logging import setup_logging
from interfaces.api.routes.file_routes import router as file_router
from interfaces.api.routes.upload_routes import router as upload_router
from interfaces.dependencies import get_container

# Configure structured logging
setup_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
    """Handle application startup and shutdown."""
    logger.info("app_starting", env=settings.app_env)
    container = get_container()

    # Unique filename index; the repository retries it before the first insert
    try:
        await container[BlobRecordRepository].ensure_indexes()
    except InfrastructureError as e:
        logger.warning("record_store_initialization_deferred", error=str(e))

    logger.info("app_ready")

    yield

    logger.info("app_shutting_down")
    await container[HttpClients].aclose()
    container[AsyncIOMotorClient].close()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Dual-backend blob storage gateway",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(upload_router)
    app.include_router(file_router, prefix=settings.file_route_prefix)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create app instance
app = create_app()
