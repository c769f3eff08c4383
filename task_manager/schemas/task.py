"""
Task Pydantic schemas.
"""

from typing import List

from pydantic import field_validator

from task_manager.models.task import Task
from task_manager.schemas.base import CamelModel, Envelope


class TaskFields(CamelModel):
    """
    Editable task fields, shared by the JSON and multipart input paths.

    Omitted or null fields become an empty string; an update replaces all five.
    """

    name: str = ""
    date: str = ""
    description: str = ""
    task_status: str = ""
    task_category: str = ""

    @field_validator('name', 'date', 'description', 'task_status', 'task_category', mode='before')
    @classmethod
    def null_as_empty(cls, v):
        return "" if v is None else v


class TaskStatusUpdate(CamelModel):
    """Body of a status-only update."""

    task_status: str


class TaskRead(TaskFields):
    """Schema for reading task data (API response)."""

    id: str
    user_id: str
    file_id: str
    file_url: str

    @classmethod
    def from_task(cls, task: Task, file_url: str) -> "TaskRead":
        return cls(
            id=str(task.id),
            user_id=task.user_id,
            name=task.name,
            date=task.date,
            description=task.description,
            task_status=task.task_status,
            task_category=task.task_category,
            file_id=task.file_id,
            file_url=file_url,
        )


class SaveTaskResponse(Envelope, CamelModel):
    message: str
    file_url: str
    new_task: TaskRead


class TaskListResponse(Envelope):
    data: List[TaskRead]
