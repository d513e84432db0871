"""Database models for Family Vault."""

from familyvault.models.base import Base
from familyvault.models.category import Category, Subcategory
from familyvault.models.document import Document
from familyvault.models.folder import Folder
from familyvault.models.records import (
    CategoryRecord,
    DocumentRecord,
    FolderRecord,
    SubcategoryRecord,
)
from familyvault.models.user import User, new_id

__all__ = [
    "Base",
    "Category",
    "CategoryRecord",
    "Document",
    "DocumentRecord",
    "Folder",
    "FolderRecord",
    "Subcategory",
    "SubcategoryRecord",
    "User",
    "new_id",
]
