"""FastAPI application exposing keyset-paginated document listings."""

import logging
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI
from pymongo.errors import PyMongoError

from .config import get_settings
from .db.connection import db_manager
from .errors import register_exception_handlers
from .errors.problem_details import ServiceUnavailableError
from .routes import documents_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format=get_settings().log_format
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting Mongo Paging API")
    settings = get_settings()

    logging.getLogger().setLevel(getattr(logging, settings.log_level))

    await db_manager.initialize()
    try:
        await db_manager.ping()
        logger.info("Database connectivity verified")
    except PyMongoError as e:
        # The client reconnects on demand; /health reports the outage.
        logger.error(f"Database not reachable at startup: {e}")

    yield

    logger.info("Shutting down Mongo Paging API")
    await db_manager.close()
    logger.info("Database client closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Keyset (cursor) pagination over MongoDB collections",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    register_exception_handlers(app)

    app.include_router(documents_router, prefix="/v1")

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint with database connectivity test."""
        try:
            await db_manager.ping()
        except PyMongoError as e:
            logger.error(f"Health check failed: {e}")
            raise ServiceUnavailableError(
                detail="Database connection failed",
                database_error=str(e)
            )

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": VERSION,
            "database": "connected"
        }

    @app.get("/live", tags=["Health"])
    async def liveness_check() -> Dict[str, str]:
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": settings.app_name
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "mongopaging.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
