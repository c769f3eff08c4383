"""
Integration tests against a real MongoDB.

Skipped unless RUN_DB_TESTS=1; MONGO_URI must point at a disposable server.
"""

import io
import uuid

import pytest

from task_manager.core.config import settings
from task_manager.db.session import create_client, ensure_indexes, ping
from task_manager.models.task import TaskStatus
from task_manager.repositories.task_repository import TaskNotFoundError, TaskRepository
from task_manager.repositories.user_repository import UserRepository, UsernameTakenError
from task_manager.schemas.task import TaskFields
from task_manager.storage.gridfs_store import GridFSFileStore


pytestmark = pytest.mark.db


@pytest.fixture
async def mongo_db():
    client = create_client(settings)
    db = client[f"task_manager_test_{uuid.uuid4().hex[:8]}"]
    await ensure_indexes(db)
    try:
        yield db
    finally:
        await client.drop_database(db.name)
        client.close()


async def test_ping(mongo_db):
    assert await ping(mongo_db)


async def test_unique_username_index(mongo_db):
    users = UserRepository(mongo_db)
    await users.create("alice", "hash")

    with pytest.raises(UsernameTakenError):
        await users.create("alice", "hash")


async def test_task_lifecycle(mongo_db):
    repo = TaskRepository(mongo_db)
    fields = TaskFields(name="Pay rent", task_status=TaskStatus.TODO)

    task = await repo.create("alice", fields, "blob")
    await repo.update_status("alice", str(task.id), TaskStatus.COMPLETED)

    assert [t.name for t in await repo.list("alice", status=TaskStatus.COMPLETED)] == ["Pay rent"]
    with pytest.raises(TaskNotFoundError):
        await repo.delete("bob", str(task.id))
    await repo.delete("alice", str(task.id))
    assert await repo.list("alice") == []


async def test_gridfs_round_trip_and_default_reuse(mongo_db):
    store = GridFSFileStore.from_database(mongo_db, settings)

    file_id = await store.upload("notes.txt", io.BytesIO(b"hello gridfs"))
    stored = await store.open(file_id)
    assert b"".join([chunk async for chunk in stored.chunks]) == b"hello gridfs"

    first = await store.upload_default()
    restarted = GridFSFileStore.from_database(mongo_db, settings)
    assert await restarted.upload_default() == first
