"""Health check router."""

import logging

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from task_manager.core.config import settings
from task_manager.core.dependencies import get_db
from task_manager.db.session import ping

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint - confirms the backend is up."""
    return {"message": f"{settings.APP_NAME} is running"}


@router.get("/health")
async def health_check(db: AsyncIOMotorDatabase = Depends(get_db)):
    """Lightweight health endpoint with a MongoDB ping."""
    try:
        db_ok = await ping(db)
    except PyMongoError:
        logger.warning("Health check could not reach MongoDB", exc_info=True)
        db_ok = False

    return {"api_ok": True, "db_ok": db_ok}
