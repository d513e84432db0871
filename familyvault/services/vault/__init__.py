"""Vault taxonomy services."""

from familyvault.services.vault.cascade import (
    delete_category_with_cascade,
    delete_custom_category,
    delete_custom_subcategory,
    delete_document,
    delete_folder_with_cascade,
    delete_subcategory_with_cascade,
)
from familyvault.services.vault.counts import (
    get_all_category_document_counts,
    get_all_subcategory_document_counts,
    get_category_document_count,
    get_subcategory_document_count,
)
from familyvault.services.vault.folders import (
    FolderContents,
    create_folder,
    load_folder_contents,
)
from familyvault.services.vault.loader import (
    CategoryListing,
    SubcategoryListing,
    load_categories_optimized,
    load_subcategories_optimized,
)
from familyvault.services.vault.sync import SyncResult, sync_default_categories
from familyvault.services.vault.uploads import UploadFileData, upload_document

__all__ = [
    "CategoryListing",
    "FolderContents",
    "SubcategoryListing",
    "SyncResult",
    "UploadFileData",
    "create_folder",
    "delete_category_with_cascade",
    "delete_custom_category",
    "delete_custom_subcategory",
    "delete_document",
    "delete_folder_with_cascade",
    "delete_subcategory_with_cascade",
    "get_all_category_document_counts",
    "get_all_subcategory_document_counts",
    "get_category_document_count",
    "get_subcategory_document_count",
    "load_categories_optimized",
    "load_folder_contents",
    "load_subcategories_optimized",
    "sync_default_categories",
    "upload_document",
]
