"""FastAPI application factory: entry point for BookWorm."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes.auth import router as auth_router
from app.api.routes.books import router as books_router
from app.api.routes.genres import router as genres_router
from app.api.routes.reviews import router as reviews_router
from app.api.routes.shelves import router as shelves_router
from app.api.routes.tutorials import router as tutorials_router
from app.config import StorageBackend, settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown events."""
    logger.info("BookWorm starting up...")
    logger.info("Storage backend: %s", settings.storage_backend.value)
    logger.info("Statistics timezone: %s", settings.stats_timezone)
    yield
    logger.info("BookWorm shutting down...")


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """A failed read or write aborts the request; nothing partial is returned."""
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="BookWorm",
        description="Book tracking with shelves, reviews and genre-based recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    application.add_exception_handler(SQLAlchemyError, database_error_handler)

    # ── Routes ─────────────────────────────────────
    application.include_router(auth_router)
    application.include_router(books_router)
    application.include_router(genres_router)
    application.include_router(shelves_router)
    application.include_router(reviews_router)
    application.include_router(tutorials_router)

    if settings.storage_backend == StorageBackend.LOCAL and settings.public_base_url.startswith("/"):
        upload_dir = Path(settings.local_storage_path)
        upload_dir.mkdir(parents=True, exist_ok=True)
        application.mount(
            settings.public_base_url,
            StaticFiles(directory=upload_dir),
            name="uploads",
        )

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "bookworm"}

    return application


app = create_app()
