"""
Attachment download service.
"""

from typing import Optional

from fastapi import status
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.errors import raise_app_error, raise_unauthorized
from task_manager.models.task import parse_object_id
from task_manager.repositories.task_repository import TaskRepository
from task_manager.storage.gridfs_store import (
    GridFSFileStore,
    InvalidFileIdError,
    StoredFile,
    StoredFileNotFoundError,
)


class FileService:
    """Resolves a blob id to a readable file, enforcing task ownership."""

    def __init__(self, db: AsyncIOMotorDatabase, file_store: GridFSFileStore):
        self.task_repository = TaskRepository(db)
        self.file_store = file_store

    async def open_file(
        self,
        file_id: str,
        username: Optional[str],
        require_owner: bool = True,
    ) -> StoredFile:
        """
        Open a blob for download.

        With ``require_owner`` the caller must be authenticated and own a task
        that references the blob. A blob none of their tasks reference looks
        missing, the same way a foreign task does.
        """
        if require_owner and username is None:
            raise_unauthorized()

        if parse_object_id(file_id) is None:
            raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_FILE_ID", "Invalid file ID")

        if require_owner and not await self.task_repository.owns_file(username, file_id):
            raise_app_error(status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND", "File not found")

        try:
            return await self.file_store.open(file_id)
        except InvalidFileIdError:
            raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_FILE_ID", "Invalid file ID")
        except StoredFileNotFoundError:
            raise_app_error(status.HTTP_404_NOT_FOUND, "FILE_NOT_FOUND", "File not found")
