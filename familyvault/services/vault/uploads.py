"""Two-phase document upload: blob first, then the metadata row."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from familyvault.blobs import BlobStore
from familyvault.errors import CompensationFailure, UploadError, VaultError
from familyvault.models import DocumentRecord
from familyvault.store import VaultStore

logger = logging.getLogger("familyvault.uploads")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadFileData:
    name: str
    content: bytes
    mime_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


def generate_storage_path(user_id: str, original_filename: str) -> str:
    """Build a collision-resistant key in the user's namespace.

    Args:
        user_id: Owner of the blob; becomes the key prefix
        original_filename: Name supplied by the client, used for the extension

    Returns:
        Key of the form ``<user_id>/<random>_<epoch ms>.<ext>``
    """
    ext = Path(original_filename).suffix.lower().lstrip(".") or "bin"
    random_part = uuid.uuid4().hex[:13]
    return f"{user_id}/{random_part}_{int(time.time() * 1000)}.{ext}"


async def upload_document(
    store: VaultStore,
    blobs: BlobStore,
    file: UploadFileData,
    user_id: str,
    category_id: str | None = None,
    subcategory_id: str | None = None,
    folder_id: str | None = None,
) -> DocumentRecord:
    """Store the file bytes and record the document.

    If the metadata insert fails the blob is removed again; a failing removal
    is only logged and the insert error is what the caller sees.
    """
    storage_path = generate_storage_path(user_id, file.name)
    content_type = file.mime_type or DEFAULT_CONTENT_TYPE

    try:
        await blobs.upload(storage_path, file.content, content_type)
    except VaultError as exc:
        logger.error("Storage upload error: %s", exc)
        raise UploadError("upload_document", f"Upload failed: {exc.message}") from exc

    try:
        return await store.insert_document(
            {
                "user_id": user_id,
                "category_id": category_id,
                "subcategory_id": subcategory_id,
                "folder_id": folder_id,
                "file_name": file.name,
                "file_size": file.size,
                "file_type": file.mime_type,
                "storage_path": storage_path,
                "uploaded_at": datetime.now(UTC),
            }
        )
    except Exception as exc:
        logger.error("Database insert error for %s: %s", storage_path, exc)
        await _remove_orphan_blob(blobs, storage_path)
        raise


async def _remove_orphan_blob(blobs: BlobStore, storage_path: str) -> None:
    try:
        await blobs.remove([storage_path])
    except Exception as exc:
        failure = CompensationFailure("upload_document", str(exc))
        logger.warning("Could not remove orphaned blob %s: %s", storage_path, failure)
