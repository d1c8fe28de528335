"""FastAPI application entry point for SongSheet."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from songsheet import __version__
from songsheet.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Ensure data directories exist
    settings.structures_path.mkdir(parents=True, exist_ok=True)
    logger.info("Storing spreadsheet structures in %s", settings.structures_path)

    yield


app = FastAPI(
    title=settings.app_name,
    description="Song catalog import from rhythm-game spreadsheets",
    version=__version__,
    lifespan=lifespan,
)

# Only allow origins from the whitelist; empty list means same-origin only
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type"],
        max_age=600,  # Cache preflight for 10 minutes
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": __version__,
            "app_name": settings.app_name,
        }
    )


# Import and include routers
from songsheet.routers import games, import_router  # noqa: E402

app.include_router(games.router, prefix="/api/games", tags=["Games"])
app.include_router(import_router.router, prefix="/api/import", tags=["Import"])
