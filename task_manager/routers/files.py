"""
File router - serves task attachments out of GridFS.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import FileResponse, StreamingResponse
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.core.config import settings
from task_manager.core.dependencies import get_current_username, get_db, get_file_store
from task_manager.models.task import DEFAULT_FILE_SENTINEL
from task_manager.services.file_service import FileService
from task_manager.storage.gridfs_store import DEFAULT_CONTENT_TYPE, GridFSFileStore

router = APIRouter(tags=["files"])


@router.get("/files/{file_id}")
async def serve_file(
    file_id: str,
    authorization: Optional[str] = Header(None),
    db: AsyncIOMotorDatabase = Depends(get_db),
    file_store: GridFSFileStore = Depends(get_file_store),
):
    """
    Stream an attachment.

    ``/files/default`` always serves the bundled placeholder image. Other ids
    require a bearer token whose user owns a task referencing the file,
    unless FILES_REQUIRE_AUTH is turned off; the token is not looked at
    in either of those cases.
    """
    if file_id == DEFAULT_FILE_SENTINEL:
        return FileResponse(settings.DEFAULT_IMAGE_PATH, media_type=DEFAULT_CONTENT_TYPE)

    require_owner = settings.FILES_REQUIRE_AUTH
    username = await get_current_username(authorization) if require_owner else None

    service = FileService(db, file_store)
    stored = await service.open_file(file_id, username, require_owner=require_owner)
    return StreamingResponse(
        stored.chunks,
        media_type=stored.content_type,
        headers={"Content-Length": str(stored.length)},
    )
