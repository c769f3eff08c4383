"""
GridFS-backed file storage for task attachments.

Uploads are streamed from the spooled upload file into the bucket; downloads
are streamed back chunk by chunk. Blobs carry no owner; access control for
downloads lives in the files router.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, BinaryIO, Optional

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket

from task_manager.core.config import Settings, settings as default_settings
from task_manager.models.task import parse_object_id

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_IMAGE_FILENAME = "Default.jpg"


class StorageError(Exception):
    """Base class for file storage errors."""


class InvalidFileIdError(StorageError):
    """The identifier is not a 24-char hex ObjectId."""


class StoredFileNotFoundError(StorageError):
    """No blob exists under the identifier."""


class FileTooLargeError(StorageError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"File of {size} bytes exceeds the {limit} byte limit")
        self.size = size
        self.limit = limit


@dataclass
class StoredFile:
    """An opened blob ready to be streamed to a client."""

    file_id: str
    filename: str
    content_type: str
    length: int
    chunks: AsyncIterator[bytes]


async def _iter_chunks(grid_out: Any) -> AsyncIterator[bytes]:
    while True:
        chunk = await grid_out.readchunk()
        if not chunk:
            break
        yield chunk


class GridFSFileStore:
    """Upload, default-image and download operations over one GridFS bucket."""

    def __init__(
        self,
        bucket: AsyncIOMotorGridFSBucket,
        default_image_path: str,
        max_upload_bytes: int,
    ):
        self.bucket = bucket
        self.default_image_path = Path(default_image_path)
        self.max_upload_bytes = max_upload_bytes
        self._default_file_id: Optional[str] = None

    @classmethod
    def from_database(
        cls,
        db: AsyncIOMotorDatabase,
        settings: Settings = default_settings,
    ) -> "GridFSFileStore":
        return cls(
            AsyncIOMotorGridFSBucket(db),
            default_image_path=settings.DEFAULT_IMAGE_PATH,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        )

    async def upload(
        self,
        filename: str,
        source: BinaryIO,
        content_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> str:
        """
        Stream ``source`` into the bucket and return the new blob id as hex.

        Args:
            filename: Original client filename, kept for reference
            source: Readable binary file object
            content_type: MIME type served back on download
            size: Declared size in bytes, checked against the upload limit

        Raises:
            FileTooLargeError: ``size`` exceeds MAX_UPLOAD_BYTES
        """
        if size is not None and size > self.max_upload_bytes:
            raise FileTooLargeError(size, self.max_upload_bytes)

        content_type = (
            content_type
            or mimetypes.guess_type(filename)[0]
            or "application/octet-stream"
        )
        file_id = await self.bucket.upload_from_stream(
            filename,
            source,
            metadata={"contentType": content_type},
        )
        logger.debug("Stored blob %s (%s)", file_id, filename)
        return str(file_id)

    async def upload_default(self) -> str:
        """
        Return the blob id of the placeholder image, uploading it only once.

        A previously stored placeholder (``metadata.default``) is reused, so
        restarts and fileless saves do not pile up duplicate blobs.
        """
        if self._default_file_id is not None:
            return self._default_file_id

        cursor = self.bucket.find({"metadata.default": True}, limit=1)
        async for grid_out in cursor:
            self._default_file_id = str(grid_out._id)
            return self._default_file_id

        with self.default_image_path.open("rb") as fh:
            file_id = await self.bucket.upload_from_stream(
                DEFAULT_IMAGE_FILENAME,
                fh,
                metadata={"contentType": DEFAULT_CONTENT_TYPE, "default": True},
            )
        self._default_file_id = str(file_id)
        logger.info("Uploaded default image as blob %s", self._default_file_id)
        return self._default_file_id

    async def open(self, file_id: str) -> StoredFile:
        """
        Open a blob for streaming.

        Raises:
            InvalidFileIdError: malformed identifier
            StoredFileNotFoundError: no such blob
        """
        oid = parse_object_id(file_id)
        if oid is None:
            raise InvalidFileIdError(file_id)

        try:
            grid_out = await self.bucket.open_download_stream(oid)
        except NoFile as exc:
            raise StoredFileNotFoundError(file_id) from exc

        metadata = grid_out.metadata or {}
        return StoredFile(
            file_id=file_id,
            filename=grid_out.filename or "",
            content_type=metadata.get("contentType") or DEFAULT_CONTENT_TYPE,
            length=grid_out.length,
            chunks=_iter_chunks(grid_out),
        )
