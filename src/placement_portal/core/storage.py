"""
Object Storage for Student Documents

Uploaded documents (resume, ID cards, profile photo) live in an object
store; the database only keeps the URL the store hands back.

A FileStore is anything with an async ``store`` method. The production
store is Cloudinary, configured from settings on startup. When it is not
configured, document uploads answer 503.
"""

import asyncio
import io
import logging
from typing import Protocol

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from placement_portal.core.config import Settings, settings

logger = logging.getLogger(__name__)


class FileStorageError(Exception):
    """Raised when the object store rejects or fails an upload."""


class FileStore(Protocol):
    async def store(
        self,
        owner_key: str,
        kind: str,
        content: bytes,
        filename: str | None = None,
    ) -> str:
        """Store ``content`` under ``owner_key``/``kind`` and return its URL."""
        ...


class CloudinaryFileStore:
    """
    FileStore backed by Cloudinary.

    Each (owner, kind) pair maps to one public id, so uploading the same
    kind again replaces the previous file.
    """

    def __init__(self, folder: str):
        self.folder = folder

    async def store(
        self,
        owner_key: str,
        kind: str,
        content: bytes,
        filename: str | None = None,
    ) -> str:
        stream = io.BytesIO(content)
        stream.name = filename or kind

        try:
            # Cloudinary's SDK is synchronous
            result = await asyncio.to_thread(
                cloudinary.uploader.upload,
                stream,
                public_id=f"{owner_key}/{kind}",
                folder=self.folder,
                resource_type="auto",
                overwrite=True,
            )
        except cloudinary.exceptions.Error as e:
            logger.error(f"Upload of {kind} for {owner_key} failed: {e}")
            raise FileStorageError(str(e)) from e

        url = result.get("secure_url")
        if not url:
            raise FileStorageError("Object store returned no URL")

        logger.info(f"Stored {kind} for {owner_key}")
        return url


file_store: FileStore | None = None


def init_file_store(current: Settings | None = None) -> FileStore | None:
    """
    Configure the Cloudinary store if credentials are present.

    Call this on application startup. Returns None when uploads are disabled.
    """
    global file_store
    current = current or settings

    if not (
        current.cloudinary_cloud_name
        and current.cloudinary_api_key
        and current.cloudinary_api_secret
    ):
        file_store = None
        return None

    cloudinary.config(
        cloud_name=current.cloudinary_cloud_name,
        api_key=current.cloudinary_api_key,
        api_secret=current.cloudinary_api_secret,
        secure=True,
    )
    file_store = CloudinaryFileStore(folder=current.cloudinary_folder)
    return file_store


def get_file_store() -> FileStore | None:
    """Return the configured store, or None if uploads are disabled."""
    return file_store
