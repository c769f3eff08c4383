"""
Schemas package.

Import all schemas here for easy access.
"""

from task_manager.schemas.base import MessageResponse
from task_manager.schemas.task import (
    SaveTaskResponse,
    TaskFields,
    TaskListResponse,
    TaskRead,
    TaskStatusUpdate,
)
from task_manager.schemas.user import LoginRequest, LoginResponse, RegisterRequest
