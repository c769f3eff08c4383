"""
Tests for the GridFS file store.
"""

import io
from pathlib import Path

import pytest

from task_manager.core.config import settings
from task_manager.storage.gridfs_store import (
    DEFAULT_CONTENT_TYPE,
    FileTooLargeError,
    GridFSFileStore,
    InvalidFileIdError,
    StoredFileNotFoundError,
)
from tests.fakes import FakeGridFSBucket


pytestmark = pytest.mark.unit


async def read_all(store, file_id):
    stored = await store.open(file_id)
    return b"".join([chunk async for chunk in stored.chunks])


async def test_upload_then_read_round_trip(file_store):
    payload = b"\x89PNG\r\n\x1a\n" + bytes(range(256))

    file_id = await file_store.upload("photo.png", io.BytesIO(payload), content_type="image/png")

    stored = await file_store.open(file_id)
    assert stored.content_type == "image/png"
    assert stored.length == len(payload)
    assert b"".join([chunk async for chunk in stored.chunks]) == payload


async def test_upload_guesses_content_type(file_store):
    file_id = await file_store.upload("notes.txt", io.BytesIO(b"hello"))

    stored = await file_store.open(file_id)
    assert stored.content_type == "text/plain"


async def test_upload_rejects_oversized_file_before_streaming(gridfs_bucket):
    store = GridFSFileStore(gridfs_bucket, settings.DEFAULT_IMAGE_PATH, max_upload_bytes=10)

    with pytest.raises(FileTooLargeError):
        await store.upload("big.bin", io.BytesIO(b"x" * 11), size=11)

    assert gridfs_bucket.files == {}


async def test_upload_default_is_uploaded_once(file_store, gridfs_bucket):
    first = await file_store.upload_default()
    second = await file_store.upload_default()

    assert first == second
    assert len(gridfs_bucket.files) == 1
    assert await read_all(file_store, first) == Path(settings.DEFAULT_IMAGE_PATH).read_bytes()

    stored = await file_store.open(first)
    assert stored.content_type == DEFAULT_CONTENT_TYPE


async def test_upload_default_reuses_existing_blob_after_restart(gridfs_bucket):
    first_store = GridFSFileStore(gridfs_bucket, settings.DEFAULT_IMAGE_PATH, settings.MAX_UPLOAD_BYTES)
    restarted_store = GridFSFileStore(gridfs_bucket, settings.DEFAULT_IMAGE_PATH, settings.MAX_UPLOAD_BYTES)

    assert await first_store.upload_default() == await restarted_store.upload_default()
    assert len(gridfs_bucket.files) == 1


async def test_open_rejects_malformed_id(file_store):
    with pytest.raises(InvalidFileIdError):
        await file_store.open("default-ish")


async def test_open_missing_blob(file_store):
    with pytest.raises(StoredFileNotFoundError):
        await file_store.open("65a1b2c3d4e5f60718293a4b")


async def test_default_image_is_bundled():
    data = Path(settings.DEFAULT_IMAGE_PATH).read_bytes()
    assert data[:2] == b"\xff\xd8"


async def test_stores_are_independent():
    a = GridFSFileStore(FakeGridFSBucket(), settings.DEFAULT_IMAGE_PATH, settings.MAX_UPLOAD_BYTES)
    b = GridFSFileStore(FakeGridFSBucket(), settings.DEFAULT_IMAGE_PATH, settings.MAX_UPLOAD_BYTES)
    file_id = await a.upload("a.txt", io.BytesIO(b"a"))

    with pytest.raises(StoredFileNotFoundError):
        await b.open(file_id)
