"""Document counts per category and subcategory.

The "all" variants fetch one column of every live document in a single query
and tally client-side, instead of issuing one COUNT per entity. Counts are
display hints: failures are logged and reported as empty.

Subcategory ids are only unique within a category (``certificates`` appears
under both education and personal), so subcategory counts accept the parent
category to keep the tallies apart.
"""

from __future__ import annotations

import logging
from collections import Counter

from familyvault.errors import VaultError
from familyvault.store import DocumentKey, VaultStore

logger = logging.getLogger("familyvault.counts")


async def _tally(
    store: VaultStore,
    user_id: str,
    column: DocumentKey,
    category_id: str | None = None,
) -> dict[str, int]:
    keys = await store.list_document_keys(user_id, column, category_id=category_id)
    return dict(Counter(key for key in keys if key))


async def get_all_category_document_counts(
    store: VaultStore, user_id: str
) -> dict[str, int]:
    """Map category id to its live document count; absent means zero."""
    try:
        return await _tally(store, user_id, "category_id")
    except VaultError as exc:
        logger.error("Error getting category document counts: %s", exc)
        return {}


async def get_all_subcategory_document_counts(
    store: VaultStore, user_id: str, category_id: str | None = None
) -> dict[str, int]:
    """Map subcategory id to its live document count; absent means zero.

    Without ``category_id`` the tally spans every category, and a subcategory
    id shared by two categories sums both.
    """
    try:
        return await _tally(store, user_id, "subcategory_id", category_id)
    except VaultError as exc:
        logger.error("Error getting subcategory document counts: %s", exc)
        return {}


async def get_category_document_count(
    store: VaultStore, category_id: str, user_id: str
) -> int:
    try:
        return await store.count_documents(user_id, category_id=category_id)
    except VaultError as exc:
        logger.error("Error getting category document count: %s", exc)
        return 0


async def get_subcategory_document_count(
    store: VaultStore,
    subcategory_id: str,
    user_id: str,
    category_id: str | None = None,
) -> int:
    try:
        return await store.count_documents(
            user_id, category_id=category_id, subcategory_id=subcategory_id
        )
    except VaultError as exc:
        logger.error("Error getting subcategory document count: %s", exc)
        return 0
