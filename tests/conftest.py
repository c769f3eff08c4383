"""
Pytest configuration and shared fixtures.
"""

import os

import pytest
from fastapi.testclient import TestClient

from task_manager.core.config import settings
from task_manager.core.dependencies import get_db, get_file_store
from task_manager.core.jwt import create_access_token
from task_manager.main import app
from task_manager.storage.gridfs_store import GridFSFileStore
from tests.fakes import FakeDatabase, FakeGridFSBucket


# Test credentials
TEST_USERNAME = "alice"
TEST_PASSWORD = "correct horse battery staple"
OTHER_USERNAME = "bob"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires a running MongoDB")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Use the cheapest bcrypt cost so auth tests stay quick."""
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def gridfs_bucket():
    return FakeGridFSBucket()


@pytest.fixture
def file_store(gridfs_bucket):
    return GridFSFileStore(
        gridfs_bucket,
        default_image_path=settings.DEFAULT_IMAGE_PATH,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
    )


@pytest.fixture
def client(fake_db, file_store):
    """
    TestClient wired to in-memory storage.

    The lifespan (real MongoDB connection) is not started; the database and
    file store dependencies are overridden instead.
    """
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_file_store] = lambda: file_store
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


def auth_headers(username: str = TEST_USERNAME) -> dict:
    return {"Authorization": f"Bearer {create_access_token(username)}"}
