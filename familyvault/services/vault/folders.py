"""Folders inside a subcategory and the documents filed in them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from familyvault.errors import InvalidName, NotFoundOrForbidden
from familyvault.models import DocumentRecord, FolderRecord
from familyvault.store import VaultStore

logger = logging.getLogger("familyvault.folders")

FOLDER_NAME_MIN_LENGTH = 2
FOLDER_NAME_MAX_LENGTH = 50


@dataclass(frozen=True)
class FolderContents:
    folder: FolderRecord | None
    folders: list[FolderRecord] = field(default_factory=list)
    documents: list[DocumentRecord] = field(default_factory=list)


def clean_folder_name(name: str) -> str:
    """Strip the name and enforce the length bounds.

    Raises:
        InvalidName: The stripped name is shorter than 2 or longer than 50.
    """
    cleaned = name.strip()
    if not FOLDER_NAME_MIN_LENGTH <= len(cleaned) <= FOLDER_NAME_MAX_LENGTH:
        raise InvalidName(
            "create_folder",
            f"Name must be between {FOLDER_NAME_MIN_LENGTH} and "
            f"{FOLDER_NAME_MAX_LENGTH} characters",
        )
    return cleaned


async def create_folder(
    store: VaultStore,
    user_id: str,
    category_id: str,
    subcategory_id: str,
    name: str,
    parent_folder_id: str | None = None,
) -> FolderRecord:
    folder = await store.create_folder(
        user_id,
        category_id,
        subcategory_id,
        clean_folder_name(name),
        parent_folder_id=parent_folder_id,
    )
    logger.info("Created folder %s for %s", folder.id, user_id)
    return folder


async def load_folder_contents(
    store: VaultStore,
    user_id: str,
    category_id: str,
    subcategory_id: str,
    folder_id: str | None = None,
) -> FolderContents:
    """Folders and documents one level below a subcategory root or a folder.

    Like the other loaders, the queries run concurrently and any failure
    fails the whole call.
    """
    if folder_id is None:
        folders, documents = await asyncio.gather(
            store.list_folders(user_id, category_id, subcategory_id),
            store.list_folder_documents(user_id, category_id, subcategory_id),
        )
        return FolderContents(folder=None, folders=folders, documents=documents)

    folder, folders, documents = await asyncio.gather(
        store.get_folder(user_id, folder_id),
        store.list_folders(user_id, category_id, subcategory_id, folder_id),
        store.list_folder_documents(user_id, category_id, subcategory_id, folder_id),
    )
    if folder is None:
        raise NotFoundOrForbidden("load_folder_contents", "Folder not found")
    return FolderContents(folder=folder, folders=folders, documents=documents)
