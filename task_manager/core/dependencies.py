"""
FastAPI dependencies for the application.
"""

import logging
from typing import Optional

from fastapi import Header, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from task_manager.core.jwt import ExpiredTokenError, TokenError, extract_username
from task_manager.errors import raise_unauthorized
from task_manager.storage.gridfs_store import GridFSFileStore

logger = logging.getLogger(__name__)


async def get_db(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the database handle opened at startup."""
    return request.app.state.db


async def get_file_store(request: Request) -> GridFSFileStore:
    """Dependency to get the GridFS file store created at startup."""
    return request.app.state.file_store


async def get_current_username(authorization: Optional[str] = Header(None)) -> str:
    """
    Get the authenticated username from the ``Authorization`` header.

    Raises:
        401: If the token is missing, invalid, expired or lacks a username
    """
    try:
        return extract_username(authorization)
    except ExpiredTokenError as exc:
        logger.debug("Rejected bearer token: %s", exc.reason)
        raise_unauthorized("Token has expired", "TOKEN_EXPIRED")
    except TokenError as exc:
        logger.debug("Rejected bearer token: %s", exc.reason)
        raise_unauthorized()
