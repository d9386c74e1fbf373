# wardrobe_project/main.py
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from contextlib import asynccontextmanager
from typing import Optional
import logging
import os

# Configuration and Routers
from config.settings import Settings, settings as default_settings
from .apis import (
    auth_routes, user_routes, upload_routes, item_routes, outfit_routes,
    suggestion_routes, analytics_routes,
)
from .core.logging_config import configure_logging
from .core.resources import AppResources
from .db.database import create_tables

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, resources: Optional[AppResources] = None) -> FastAPI:
    """Builds the application. Tests pass their own settings and pre-wired resources."""
    settings = settings or default_settings
    resources = resources or AppResources(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting up {settings.PROJECT_NAME}...")
        resources.initialize()
        if settings.AUTO_CREATE_TABLES:
            await create_tables(resources.engine)
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.resources = resources
    app.state.settings = settings

    @app.exception_handler(OperationalError)
    async def database_unavailable_handler(request: Request, exc: OperationalError):
        logger.error(f"Database error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Database is temporarily unavailable."},
        )

    # Include all routers
    app.include_router(auth_routes.router, prefix=settings.API_V1_STR)
    app.include_router(user_routes.router, prefix=settings.API_V1_STR)
    app.include_router(upload_routes.router, prefix=settings.API_V1_STR)
    app.include_router(item_routes.router, prefix=settings.API_V1_STR)
    app.include_router(suggestion_routes.router, prefix=settings.API_V1_STR)
    app.include_router(outfit_routes.router, prefix=settings.API_V1_STR)
    app.include_router(analytics_routes.router, prefix=settings.API_V1_STR)

    # Locally stored uploads are served by the app itself
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    @app.get("/health", tags=["Health"])
    async def health():
        """Liveness plus a database round-trip."""
        try:
            async with resources.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "degraded", "database": "unavailable"},
            )
        return {
            "status": "ok",
            "database": "ok",
            "ai_provider": resources.provider.name if resources.provider else None,
            "object_store": type(resources.object_store).__name__,
        }

    return app


configure_logging()
app = create_app()
