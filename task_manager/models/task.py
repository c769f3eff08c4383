"""
Task document model.

Tasks live in the ``task_management_data`` collection. Every task belongs to
exactly one user, referenced by username in the ``userId`` field.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId


TASK_COLLECTION = "task_management_data"

# Placeholder blob id served from the bundled image without touching GridFS
DEFAULT_FILE_SENTINEL = "default"


class TaskStatus:
    """Allowed values of ``taskStatus``."""
    TODO = "TO-DO"
    IN_PROGRESS = "IN-PROGRESS"
    COMPLETED = "COMPLETED"

    ALL = [TODO, IN_PROGRESS, COMPLETED]


def is_valid_status(value: Optional[str]) -> bool:
    return value in TaskStatus.ALL


def parse_object_id(value: str) -> Optional[ObjectId]:
    """Parse a 24-char hex identifier; returns None when malformed."""
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


@dataclass
class Task:
    """
    A stored task.

    Field names follow Python conventions; ``to_document``/``from_document``
    translate to the camelCase keys used in the collection.
    """

    user_id: str
    name: str = ""
    date: str = ""
    description: str = ""
    task_status: str = ""
    task_category: str = ""
    file_id: str = ""
    id: Optional[ObjectId] = None

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "userId": self.user_id,
            "name": self.name,
            "date": self.date,
            "description": self.description,
            "taskStatus": self.task_status,
            "taskCategory": self.task_category,
            "fileId": self.file_id,
        }
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Task":
        return cls(
            id=doc.get("_id"),
            user_id=doc.get("userId", ""),
            name=doc.get("name", ""),
            date=doc.get("date", ""),
            description=doc.get("description", ""),
            task_status=doc.get("taskStatus", ""),
            task_category=doc.get("taskCategory", ""),
            file_id=doc.get("fileId", ""),
        )


@dataclass(frozen=True)
class TaskFilter:
    """
    Owner-scoped query for the task collection.

    ``owner`` is always part of the query, so a filter can never match a task
    belonging to someone else.
    """

    owner: str
    task_id: Optional[ObjectId] = None
    status: Optional[str] = None
    file_id: Optional[str] = None

    def to_query(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {"userId": self.owner}
        if self.task_id is not None:
            query["_id"] = self.task_id
        if self.status:
            query["taskStatus"] = self.status
        if self.file_id:
            query["fileId"] = self.file_id
        return query
