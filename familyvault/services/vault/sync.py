"""Seeding of the default taxonomy for a user."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from familyvault.catalog import (
    DEFAULT_ICON,
    VAULT_CATEGORIES,
    iter_subcategory_templates,
)
from familyvault.errors import DuplicateKeyError, SyncError, VaultError
from familyvault.store import VaultStore

logger = logging.getLogger("familyvault.sync")


@dataclass(frozen=True)
class SyncResult:
    categories_created: int = 0
    subcategories_created: int = 0
    skipped: bool = False


def build_category_rows(user_id: str) -> list[dict[str, Any]]:
    return [
        {
            "id": template.id,
            "user_id": user_id,
            "name": template.name,
            "icon": template.icon or DEFAULT_ICON,
            "icon_bg_color": template.icon_bg_color,
            "is_custom": False,
        }
        for template in VAULT_CATEGORIES
    ]


def build_subcategory_rows(user_id: str) -> list[dict[str, Any]]:
    return [
        {
            "id": sub.id,
            "user_id": user_id,
            "category_id": category.id,
            "name": sub.name,
            "icon": sub.icon or DEFAULT_ICON,
            "is_custom": False,
        }
        for category, sub in iter_subcategory_templates()
    ]


async def sync_default_categories(store: VaultStore, user_id: str) -> SyncResult:
    """Create the template categories and subcategories once per user.

    Safe to call on every sign-in and from several tasks at once: losers of a
    first-run race hit a duplicate key, which counts as success.
    """
    try:
        existing = await store.count_default_categories(user_id)
    except VaultError as exc:
        raise SyncError("sync_default_categories", exc.message) from exc
    if existing > 0:
        return SyncResult(skipped=True)

    categories_created = 0
    try:
        categories_created = await store.insert_categories(build_category_rows(user_id))
    except DuplicateKeyError:
        logger.debug("Default categories for %s already seeded concurrently", user_id)
    except VaultError as exc:
        logger.error("Error inserting default categories for %s: %s", user_id, exc)
        raise SyncError("sync_default_categories", exc.message) from exc

    subcategories_created = 0
    try:
        subcategories_created = await store.insert_subcategories(
            build_subcategory_rows(user_id)
        )
    except DuplicateKeyError:
        logger.debug("Default subcategories for %s already seeded", user_id)
    except VaultError:
        # Categories are in place and they are what the probe checks.
        logger.exception("Error inserting default subcategories for %s", user_id)

    if categories_created or subcategories_created:
        logger.info(
            "Seeded %d categories and %d subcategories for %s",
            categories_created,
            subcategories_created,
            user_id,
        )
    return SyncResult(
        categories_created=categories_created,
        subcategories_created=subcategories_created,
    )
