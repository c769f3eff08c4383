"""
Task repository - database operations for Task.

Every query goes through ``TaskFilter`` so the owner is always part of it.
A task that exists but belongs to another user looks exactly like a missing one.
"""

from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.models.task import (
    TASK_COLLECTION,
    Task,
    TaskFilter,
    is_valid_status,
    parse_object_id,
)
from task_manager.schemas.task import TaskFields


class InvalidTaskIdError(Exception):
    """Raised when a task id is not a 24-char hex ObjectId."""


class InvalidTaskStatusError(Exception):
    """Raised when a status is outside TaskStatus.ALL."""


class TaskNotFoundError(Exception):
    """Raised when no task matches both the id and the owner."""


def _require_object_id(task_id: str) -> ObjectId:
    oid = parse_object_id(task_id)
    if oid is None:
        raise InvalidTaskIdError(task_id)
    return oid


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[TASK_COLLECTION]

    async def list(self, owner: str, status: Optional[str] = None) -> List[Task]:
        """List an owner's tasks in store order, optionally by exact status."""
        cursor = self.collection.find(TaskFilter(owner=owner, status=status).to_query())
        return [Task.from_document(doc) async for doc in cursor]

    async def create(self, owner: str, data: TaskFields, file_id: str) -> Task:
        """Insert a task and return it as stored, including its new id."""
        task = Task(
            user_id=owner,
            name=data.name,
            date=data.date,
            description=data.description,
            task_status=data.task_status,
            task_category=data.task_category,
            file_id=file_id,
        )
        result = await self.collection.insert_one(task.to_document())

        stored = await self.collection.find_one({"_id": result.inserted_id})
        if stored is None:
            raise TaskNotFoundError(str(result.inserted_id))
        return Task.from_document(stored)

    async def update_fields(
        self,
        owner: str,
        task_id: str,
        data: TaskFields,
        file_id: Optional[str] = None,
    ) -> None:
        """Replace the editable fields; the file reference only changes when given."""
        oid = _require_object_id(task_id)

        update = {
            "name": data.name,
            "date": data.date,
            "description": data.description,
            "taskStatus": data.task_status,
            "taskCategory": data.task_category,
        }
        if file_id:
            update["fileId"] = file_id

        result = await self.collection.update_one(
            TaskFilter(owner=owner, task_id=oid).to_query(),
            {"$set": update},
        )
        if result.matched_count == 0:
            raise TaskNotFoundError(task_id)

    async def update_status(self, owner: str, task_id: str, status: str) -> None:
        """Set ``taskStatus`` after checking it against the allowed values."""
        if not is_valid_status(status):
            raise InvalidTaskStatusError(status)
        oid = _require_object_id(task_id)

        result = await self.collection.update_one(
            TaskFilter(owner=owner, task_id=oid).to_query(),
            {"$set": {"taskStatus": status}},
        )
        if result.matched_count == 0:
            raise TaskNotFoundError(task_id)

    async def delete(self, owner: str, task_id: str) -> None:
        oid = _require_object_id(task_id)
        result = await self.collection.delete_one(TaskFilter(owner=owner, task_id=oid).to_query())
        if result.deleted_count == 0:
            raise TaskNotFoundError(task_id)

    async def owns_file(self, owner: str, file_id: str) -> bool:
        """True when at least one of the owner's tasks references the blob."""
        doc = await self.collection.find_one(
            TaskFilter(owner=owner, file_id=file_id).to_query(),
            projection={"_id": 1},
        )
        return doc is not None
