"""Screen hydration: listings and counts fetched concurrently."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from familyvault.models import CategoryRecord, SubcategoryRecord
from familyvault.services.vault.counts import (
    get_all_category_document_counts,
    get_all_subcategory_document_counts,
    get_category_document_count,
)
from familyvault.store import VaultStore


@dataclass(frozen=True)
class CategoryListing:
    categories: list[CategoryRecord]
    doc_counts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SubcategoryListing:
    subcategories: list[SubcategoryRecord]
    doc_counts: dict[str, int] = field(default_factory=dict)
    total_doc_count: int = 0


async def load_categories_optimized(store: VaultStore, user_id: str) -> CategoryListing:
    """Custom categories plus per-category counts, in one concurrent round.

    If either query raises, so does this call; there is no partial listing.
    """
    doc_counts, categories = await asyncio.gather(
        get_all_category_document_counts(store, user_id),
        store.list_custom_categories(user_id),
    )
    return CategoryListing(categories=categories, doc_counts=doc_counts)


async def load_subcategories_optimized(
    store: VaultStore, user_id: str, category_id: str
) -> SubcategoryListing:
    """Custom subcategories of a category, their counts and the category total."""
    doc_counts, subcategories, total = await asyncio.gather(
        get_all_subcategory_document_counts(store, user_id, category_id),
        store.list_custom_subcategories(user_id, category_id),
        get_category_document_count(store, category_id, user_id),
    )
    return SubcategoryListing(
        subcategories=subcategories,
        doc_counts=doc_counts,
        total_doc_count=total,
    )
