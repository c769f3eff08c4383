"""
MongoDB client configuration.

One motor client is created when the app starts and closed when it stops.
The client and database handles live on ``app.state``; handlers receive the
database through the ``get_db`` dependency.
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from task_manager.core.config import Settings, settings as default_settings
from task_manager.models.task import TASK_COLLECTION
from task_manager.models.user import USER_COLLECTION

logger = logging.getLogger(__name__)


def create_client(settings: Settings = default_settings) -> AsyncIOMotorClient:
    """Build the motor client; no network I/O happens until the first command."""
    return AsyncIOMotorClient(
        settings.MONGO_URI,
        connectTimeoutMS=settings.MONGO_CONNECT_TIMEOUT_MS,
        serverSelectionTimeoutMS=settings.MONGO_CONNECT_TIMEOUT_MS,
    )


def get_database(client: AsyncIOMotorClient, settings: Settings = default_settings) -> AsyncIOMotorDatabase:
    return client[settings.MONGO_DB_NAME]


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the indexes the repositories rely on (idempotent)."""
    await db[USER_COLLECTION].create_index([("username", ASCENDING)], unique=True)
    await db[TASK_COLLECTION].create_index([("userId", ASCENDING), ("taskStatus", ASCENDING)])
    await db[TASK_COLLECTION].create_index([("userId", ASCENDING), ("fileId", ASCENDING)])


async def ping(db: AsyncIOMotorDatabase) -> bool:
    """Return True when the server answers a ping."""
    result = await db.command("ping")
    return bool(result.get("ok"))
