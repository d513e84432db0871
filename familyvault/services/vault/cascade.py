"""Soft deletion of vault entities with everything beneath them.

The walk down the hierarchy happens inside the store's single transaction;
nothing here touches child rows directly.
"""

from __future__ import annotations

import logging

from familyvault.catalog import is_default_category, is_default_subcategory
from familyvault.errors import DefaultEntityProtected, NotFoundOrForbidden
from familyvault.store import VaultStore

logger = logging.getLogger("familyvault.cascade")


async def delete_category_with_cascade(
    store: VaultStore, category_id: str, user_id: str
) -> None:
    """Soft-delete a category, its subcategories and its documents.

    Raises:
        NotFoundOrForbidden: No live category with that id belongs to the user.
        TransportError: The store could not be reached.
    """
    deleted = await store.soft_delete_category(category_id, user_id)
    if not deleted:
        raise NotFoundOrForbidden(
            "delete_category_with_cascade", "Category not found or access denied"
        )
    logger.info("Soft-deleted category %s for %s", category_id, user_id)


async def delete_subcategory_with_cascade(
    store: VaultStore, subcategory_id: str, category_id: str, user_id: str
) -> None:
    """Soft-delete a subcategory and its documents."""
    deleted = await store.soft_delete_subcategory(subcategory_id, category_id, user_id)
    if not deleted:
        raise NotFoundOrForbidden(
            "delete_subcategory_with_cascade",
            "Subcategory not found or access denied",
        )
    logger.info(
        "Soft-deleted subcategory %s/%s for %s", category_id, subcategory_id, user_id
    )


async def delete_custom_category(
    store: VaultStore, category_id: str, user_id: str
) -> None:
    """User-initiated category delete; template categories are refused."""
    if is_default_category(category_id):
        raise DefaultEntityProtected(
            "delete_category", "Default categories cannot be deleted"
        )
    await delete_category_with_cascade(store, category_id, user_id)


async def delete_custom_subcategory(
    store: VaultStore, subcategory_id: str, category_id: str, user_id: str
) -> None:
    """User-initiated subcategory delete; template subcategories are refused."""
    if is_default_subcategory(category_id, subcategory_id):
        raise DefaultEntityProtected(
            "delete_subcategory", "Default subcategories cannot be deleted"
        )
    await delete_subcategory_with_cascade(store, subcategory_id, category_id, user_id)


async def delete_folder_with_cascade(
    store: VaultStore, folder_id: str, user_id: str
) -> None:
    """Soft-delete a folder, its nested folders and the documents in them."""
    if not await store.soft_delete_folder(folder_id, user_id):
        raise NotFoundOrForbidden(
            "delete_folder_with_cascade", "Folder not found or access denied"
        )
    logger.info("Soft-deleted folder %s for %s", folder_id, user_id)


async def delete_document(store: VaultStore, document_id: str, user_id: str) -> None:
    """Soft-delete one document. The stored blob is kept."""
    if not await store.soft_delete_document(document_id, user_id):
        raise NotFoundOrForbidden(
            "delete_document", "Document not found or access denied"
        )
    logger.info("Soft-deleted document %s for %s", document_id, user_id)
