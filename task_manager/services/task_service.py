"""
Task business logic service.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import UploadFile, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.core.config import settings
from task_manager.errors import raise_app_error
from task_manager.models.task import Task, parse_object_id
from task_manager.repositories.task_repository import (
    InvalidTaskIdError,
    InvalidTaskStatusError,
    TaskNotFoundError,
    TaskRepository,
)
from task_manager.schemas.task import TaskFields, TaskRead
from task_manager.storage.gridfs_store import FileTooLargeError, GridFSFileStore

logger = logging.getLogger(__name__)


def build_file_url(file_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/files/{file_id}"


@contextmanager
def _task_errors() -> Iterator[None]:
    """Translate repository errors into API errors."""
    try:
        yield
    except InvalidTaskIdError:
        raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_TASK_ID", "Invalid task ID format")
    except InvalidTaskStatusError:
        raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_TASK_STATUS", "Invalid task status")
    except TaskNotFoundError:
        raise_app_error(
            status.HTTP_404_NOT_FOUND,
            "TASK_NOT_FOUND",
            "Task not found or unauthorized",
        )


class TaskService:
    """Service for task business logic."""

    def __init__(self, db: AsyncIOMotorDatabase, file_store: GridFSFileStore):
        self.repository = TaskRepository(db)
        self.file_store = file_store

    def to_read(self, task: Task) -> TaskRead:
        return TaskRead.from_task(task, build_file_url(task.file_id))

    async def store_upload(self, upload: Optional[UploadFile]) -> Optional[str]:
        """Stream an uploaded file into GridFS; None when no file was sent."""
        if upload is None or not upload.filename:
            return None
        try:
            return await self.file_store.upload(
                upload.filename,
                upload.file,
                content_type=upload.content_type,
                size=upload.size,
            )
        except FileTooLargeError as exc:
            raise_app_error(status.HTTP_400_BAD_REQUEST, "FILE_TOO_LARGE", str(exc))

    async def create_task(
        self,
        owner: str,
        data: TaskFields,
        upload: Optional[UploadFile] = None,
    ) -> TaskRead:
        """Create a task; without a file it points at the shared default image."""
        file_id = await self.store_upload(upload)
        if file_id is None:
            file_id = await self.file_store.upload_default()

        task = await self.repository.create(owner, data, file_id)
        logger.info("User %s created task %s", owner, task.id)
        return self.to_read(task)

    async def list_tasks(self, owner: str, status_filter: Optional[str] = None) -> List[TaskRead]:
        """List the owner's tasks, optionally only those with the given status."""
        tasks = await self.repository.list(owner, status=status_filter or None)
        return [self.to_read(task) for task in tasks]

    async def update_task(
        self,
        owner: str,
        task_id: str,
        data: TaskFields,
        upload: Optional[UploadFile] = None,
    ) -> None:
        """Replace a task's fields, and its file when a new one is uploaded."""
        # Reject a malformed id before anything is written to GridFS
        if parse_object_id(task_id) is None:
            raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_TASK_ID", "Invalid task ID format")

        file_id = await self.store_upload(upload)
        with _task_errors():
            await self.repository.update_fields(owner, task_id, data, file_id=file_id)
        logger.info("User %s updated task %s", owner, task_id)

    async def update_task_status(self, owner: str, task_id: str, new_status: str) -> None:
        with _task_errors():
            await self.repository.update_status(owner, task_id, new_status)
        logger.info("User %s moved task %s to %s", owner, task_id, new_status)

    async def delete_task(self, owner: str, task_id: str) -> None:
        with _task_errors():
            await self.repository.delete(owner, task_id)
        logger.info("User %s deleted task %s", owner, task_id)
