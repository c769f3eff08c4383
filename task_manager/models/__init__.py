"""
Models package.

Document shapes for the MongoDB collections, importable from one place.
"""

from task_manager.models.task import (
    DEFAULT_FILE_SENTINEL,
    TASK_COLLECTION,
    Task,
    TaskFilter,
    TaskStatus,
)
from task_manager.models.user import USER_COLLECTION, User

__all__ = [
    "DEFAULT_FILE_SENTINEL",
    "TASK_COLLECTION",
    "Task",
    "TaskFilter",
    "TaskStatus",
    "USER_COLLECTION",
    "User",
]
