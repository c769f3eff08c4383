"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from task_manager.core.config import DEFAULT_SECRET_KEY, settings
from task_manager.core.logging import setup_logging
from task_manager.db.session import create_client, ensure_indexes, get_database
from task_manager.errors import register_error_handlers
from task_manager.routers import auth, files, health, task
from task_manager.storage.gridfs_store import GridFSFileStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: connect to MongoDB, ensure indexes, resolve the default image.
    - On shutdown: close the MongoDB client.
    """
    setup_logging()
    logger.info("Starting %s...", settings.APP_NAME)
    if settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is the built-in placeholder; set it in the environment")

    client = create_client(settings)
    db = get_database(client, settings)
    file_store = GridFSFileStore.from_database(db, settings)

    await ensure_indexes(db)
    await file_store.upload_default()
    logger.info("Connected to MongoDB database %s", settings.MONGO_DB_NAME)

    app.state.mongo_client = client
    app.state.db = db
    app.state.file_store = file_store

    yield  # The server runs while we're "yielded" here

    logger.info("Shutting down %s...", settings.APP_NAME)
    client.close()


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Task management API with JWT auth and GridFS attachments",
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    allow_credentials=True,
    max_age=12 * 60 * 60,
)

register_error_handlers(app)


# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router)
app.include_router(task.router)
app.include_router(files.router)
