"""Flat listings backing vault search.

Like the counts, these are advisory: errors are logged and yield an empty list.
"""

from __future__ import annotations

import logging

from familyvault.errors import VaultError
from familyvault.models import DocumentRecord, SubcategoryRecord
from familyvault.store import VaultStore

logger = logging.getLogger("familyvault.search")


async def get_all_user_documents(
    store: VaultStore, user_id: str
) -> list[DocumentRecord]:
    """Live documents, newest first."""
    try:
        return await store.list_user_documents(user_id)
    except VaultError as exc:
        logger.error("Error getting all user documents: %s", exc)
        return []


async def get_all_user_subcategories(
    store: VaultStore, user_id: str
) -> list[SubcategoryRecord]:
    """Live subcategories across all categories, ordered by name."""
    try:
        return await store.list_user_subcategories(user_id)
    except VaultError as exc:
        logger.error("Error getting all user subcategories: %s", exc)
        return []


def search_documents(
    documents: list[DocumentRecord], query: str
) -> list[DocumentRecord]:
    """Case-insensitive file name filter; an empty query matches everything."""
    needle = query.strip().lower()
    if not needle:
        return list(documents)
    return [doc for doc in documents if needle in doc.file_name.lower()]
