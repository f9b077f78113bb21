"""FastAPI application for the Photo Storybook service."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import arq_pool
from .config import BLOB_ROUTE_PREFIX, DATABASE_URL
from .logging import configure_logging
from .routes import blobs, narratives, uploads

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging()

    # Startup: Initialize database (only if DATABASE_URL is configured)
    if DATABASE_URL:
        from .database.db import create_pool, init_db

        await init_db()
        await create_pool()
        logger.info("Database initialized")
    else:
        logger.warning("DATABASE_URL not set - database not initialized")

    await arq_pool.init_pool()

    yield

    # Shutdown: Close connection pools
    from .database.db import close_pool

    await arq_pool.close_pool()
    await close_pool()


app = FastAPI(
    title="Photo Storybook API",
    description="""
Turn photos into illustrated children's storybooks.

## Features
- **Story Writing**: A multimodal model writes a 4-6 page story from your photos
- **Customization**: Choose age group, theme, length and tone
- **Illustrations**: Every page gets its own illustration, generated in the background

## Workflow
1. POST `/uploads` for each photo to get its URL
2. POST `/narratives` with the photo URLs to write and save the story
3. Poll GET `/narratives/{id}` until `illustration_status` is `illustrations_settled`
4. Share GET `/narratives/{id}/book` for the print and share views
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
app.include_router(narratives.router, prefix="/narratives", tags=["Narratives"])
app.include_router(blobs.router, prefix=BLOB_ROUTE_PREFIX, tags=["Blobs"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
