"""FastAPI dependency injection for services and repositories."""

from typing import Annotated, AsyncGenerator

import asyncpg
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth.tokens import get_owner_id
from .database.db import get_pool
from .database.repository import IllustrationRepository, NarrativeRepository, UploadRepository
from .services.blob_store import LocalBlobStore
from .services.narrative_service import NarrativeService

# Security schemes for bearer token authentication
security = HTTPBearer()


# Database connection dependency
async def get_connection() -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection from the asyncpg pool for the request."""
    async with get_pool().acquire() as conn:
        yield conn


Connection = Annotated[asyncpg.Connection, Depends(get_connection)]


# Repositories - require a connection
def get_repository(conn: Connection) -> NarrativeRepository:
    """Get a NarrativeRepository instance with injected connection."""
    return NarrativeRepository(conn)


def get_illustration_repository(conn: Connection) -> IllustrationRepository:
    """Get an IllustrationRepository instance with injected connection."""
    return IllustrationRepository(conn)


def get_upload_repository(conn: Connection) -> UploadRepository:
    """Get an UploadRepository instance with injected connection."""
    return UploadRepository(conn)


# Service - depends on repositories
def get_narrative_service(
    repo: Annotated[NarrativeRepository, Depends(get_repository)],
    illustration_repo: Annotated[IllustrationRepository, Depends(get_illustration_repository)],
) -> NarrativeService:
    """Get a NarrativeService instance with injected repositories."""
    return NarrativeService(repo, illustration_repo)


def get_blob_store() -> LocalBlobStore:
    """Get the blob store backing uploads and generated images."""
    return LocalBlobStore()


# Type aliases for cleaner route signatures
Repository = Annotated[NarrativeRepository, Depends(get_repository)]
UploadRepo = Annotated[UploadRepository, Depends(get_upload_repository)]
Service = Annotated[NarrativeService, Depends(get_narrative_service)]
BlobStore = Annotated[LocalBlobStore, Depends(get_blob_store)]


# Authentication dependencies
async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> str:
    """Verify the bearer token and return the owner identity.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    owner_id = get_owner_id(credentials.credentials)
    if owner_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return owner_id


# Type alias for authenticated users
CurrentUser = Annotated[str, Depends(get_current_user)]
