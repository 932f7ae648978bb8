"""Shared test fixtures for the FolderHub backend test suite.

All tests run against a throwaway SQLite database file and a temporary
upload directory. Each test starts from empty tables.

The app creates its tables on import, so no explicit create_all is needed
here.
"""

import os
import tempfile

# Point the app at scratch storage before any app imports.
_TMP_DIR = tempfile.mkdtemp(prefix="folderhub-tests-")
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
)
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["AUTH_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from app.database import get_db, SessionLocal
from app.main import app
from app.core.token_factory import create_token
from app.core.config import settings
from app.models import FileRecord, Folder
from app.services.upload_registry import upload_registry

# Child tables first.
_CLEAN_MODELS = [FileRecord, Folder]


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty all data tables before each test for isolation.

    Runs before the test (not after) so test failures leave data
    available for debugging.
    """
    db = SessionLocal()
    try:
        for model in _CLEAN_MODELS:
            db.query(model).delete()
        db.commit()
    finally:
        db.close()
    upload_registry.clear()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers() -> dict:
    """Valid JWT auth headers for write endpoints (when auth is enabled)."""
    token = create_token(
        subject="test-user",
        role="admin",
        secret=settings.jwt_secret_key,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_enabled(monkeypatch):
    """Turn authentication on for a single test."""
    monkeypatch.setattr(settings, "auth_enabled", True)
    yield


def make_folder(client, name: str, parent_id=None, description=None) -> dict:
    """Create a folder through the API and return its JSON body."""
    payload = {"name": name, "parent_id": parent_id}
    if description is not None:
        payload["description"] = description
    resp = client.post("/api/folders", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def upload(client, filename: str = "notes.txt", content: bytes = b"hello world", folder_id=None, description=None):
    """POST a multipart upload and return the response."""
    data = {}
    if folder_id is not None:
        data["folder_id"] = folder_id
    if description is not None:
        data["description"] = description
    return client.post(
        "/api/files/upload",
        files={"file": (filename, content, "application/octet-stream")},
        data=data,
    )
