"""
Task router - API endpoints for tasks.

Create and update accept either a JSON body or a multipart form; only the
form path can carry a ``file`` attachment.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, UploadFile, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile as StarletteUploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_manager.core.dependencies import get_current_username, get_db, get_file_store
from task_manager.errors import raise_app_error
from task_manager.schemas.base import MessageResponse
from task_manager.schemas.task import (
    SaveTaskResponse,
    TaskFields,
    TaskListResponse,
    TaskStatusUpdate,
)
from task_manager.services.task_service import TaskService
from task_manager.storage.gridfs_store import GridFSFileStore

router = APIRouter(tags=["tasks"])

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
FORM_TEXT_FIELDS = {
    "name": "name",
    "date": "date",
    "description": "description",
    "taskStatus": "task_status",
    "taskCategory": "task_category",
}


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


async def _read_json_fields(request: Request) -> TaskFields:
    try:
        payload = await request.json()
    except ValueError:
        raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_BODY", "Invalid request body")

    try:
        return TaskFields.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        message = f"{field}: {first['msg']}" if field else first["msg"]
        raise_app_error(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message)


def _form_fields(form: FormData) -> TaskFields:
    values = {}
    for form_key, attr in FORM_TEXT_FIELDS.items():
        value = form.get(form_key)
        values[attr] = value if isinstance(value, str) else ""
    return TaskFields(**values)


def _form_file(form: FormData) -> Optional[UploadFile]:
    upload = form.get("file")
    if isinstance(upload, StarletteUploadFile) and upload.filename:
        return upload
    return None


@asynccontextmanager
async def read_task_input(request: Request) -> AsyncIterator[Tuple[TaskFields, Optional[UploadFile]]]:
    """
    Bind the task fields from either a JSON body or a form.

    Yields the fields and the optional uploaded file; form resources are
    released when the block exits.
    """
    media_type = _media_type(request)
    if media_type == JSON_MEDIA_TYPE:
        yield await _read_json_fields(request), None
        return

    if media_type not in FORM_MEDIA_TYPES:
        raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_FORM", "Failed to parse form data")

    try:
        form = await request.form()
    except StarletteHTTPException:
        raise_app_error(status.HTTP_400_BAD_REQUEST, "INVALID_FORM", "Failed to parse form data")

    try:
        yield _form_fields(form), _form_file(form)
    finally:
        await form.close()


@router.post("/saveUserData", response_model=SaveTaskResponse)
async def save_user_data(
    request: Request,
    username: str = Depends(get_current_username),
    db: AsyncIOMotorDatabase = Depends(get_db),
    file_store: GridFSFileStore = Depends(get_file_store),
):
    """
    Create a new task for the current user.

    Without a file the task references the default placeholder image.
    """
    service = TaskService(db, file_store)
    async with read_task_input(request) as (fields, upload):
        task = await service.create_task(username, fields, upload)

    return SaveTaskResponse(
        message="Data saved successfully",
        file_url=task.file_url,
        new_task=task,
    )


@router.get("/getTask", response_model=TaskListResponse)
async def get_tasks(
    status_filter: Optional[str] = Query(None, alias="status"),
    username: str = Depends(get_current_username),
    db: AsyncIOMotorDatabase = Depends(get_db),
    file_store: GridFSFileStore = Depends(get_file_store),
):
    """List the current user's tasks, optionally filtered by exact status."""
    service = TaskService(db, file_store)
    tasks = await service.list_tasks(username, status_filter)
    return TaskListResponse(data=tasks)


@router.put("/updateTask/{task_id}", response_model=MessageResponse)
async def update_task(
    task_id: str,
    request: Request,
    username: str = Depends(get_current_username),
    db: AsyncIOMotorDatabase = Depends(get_db),
    file_store: GridFSFileStore = Depends(get_file_store),
):
    """
    Replace a task's fields.

    All five text fields are overwritten (missing ones become empty); the
    attachment only changes when a new file is uploaded.
    """
    service = TaskService(db, file_store)
    async with read_task_input(request) as (fields, upload):
        await service.update_task(username, task_id, fields, upload)
    return MessageResponse(message="Task updated successfully")


@router.put("/updateTaskStatus/{task_id}", response_model=MessageResponse)
async def update_task_status(
    task_id: str,
    data: TaskStatusUpdate,
    username: str = Depends(get_current_username),
    db: AsyncIOMotorDatabase = Depends(get_db),
    file_store: GridFSFileStore = Depends(get_file_store),
):
    """Move a task to TO-DO, IN-PROGRESS or COMPLETED."""
    service = TaskService(db, file_store)
    await service.update_task_status(username, task_id, data.task_status)
    return MessageResponse(message="Task status updated successfully")


@router.delete("/deleteTask/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    username: str = Depends(get_current_username),
    db: AsyncIOMotorDatabase = Depends(get_db),
    file_store: GridFSFileStore = Depends(get_file_store),
):
    """Delete one of the current user's tasks."""
    service = TaskService(db, file_store)
    await service.delete_task(username, task_id)
    return MessageResponse(message="Task deleted successfully")
