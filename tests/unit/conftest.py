"""Pytest fixtures for unit and API tests."""

import os
import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

# Fixed signing secret so tests can mint tokens
os.environ["JWT_SECRET"] = "test-jwt-secret-for-unit-tests"

from backend.api.main import app  # noqa: E402
from backend.api.auth.tokens import create_access_token  # noqa: E402
from backend.api.database.repository import NarrativeRepository, UploadRepository  # noqa: E402
from backend.api.services.blob_store import LocalBlobStore  # noqa: E402
from backend.api.services.narrative_service import NarrativeService  # noqa: E402
from backend.api.dependencies import (  # noqa: E402
    get_blob_store,
    get_narrative_service,
    get_repository,
    get_upload_repository,
)

OWNER_ID = "owner-123"
OTHER_OWNER_ID = "owner-456"


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    """Start every test with no provider credentials configured."""
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("LEONARDO_API_KEY", raising=False)
    monkeypatch.delenv("LEONARDO_API_BASE", raising=False)
    monkeypatch.delenv("LEONARDO_MODEL_ID", raising=False)


@pytest.fixture
def auth_headers():
    """Bearer headers for OWNER_ID."""
    return {"Authorization": f"Bearer {create_access_token(OWNER_ID)}"}


@pytest.fixture
def blob_store(tmp_path):
    """Blob store rooted in a temporary directory."""
    return LocalBlobStore(root=tmp_path / "blobs", public_base_url="http://testserver")


@pytest.fixture
def mock_repository():
    """Create a mock narrative repository for unit tests."""
    return AsyncMock(spec=NarrativeRepository)


@pytest.fixture
def mock_upload_repository():
    """Create a mock upload repository for unit tests."""
    return AsyncMock(spec=UploadRepository)


@pytest.fixture
def mock_service():
    """Create a mock narrative service for unit tests."""
    return AsyncMock(spec=NarrativeService)


@pytest.fixture
def client_with_mocks(mock_repository, mock_upload_repository, mock_service, blob_store):
    """TestClient with mocked dependencies.

    The client is not entered as a context manager, so the lifespan (database
    and Redis pools) does not run.
    """
    app.dependency_overrides[get_repository] = lambda: mock_repository
    app.dependency_overrides[get_upload_repository] = lambda: mock_upload_repository
    app.dependency_overrides[get_narrative_service] = lambda: mock_service
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    yield TestClient(app), mock_repository, mock_service

    app.dependency_overrides.clear()
