"""Typed records returned by the vault store.

ORM rows never leave the store; callers only see these frozen snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from familyvault.models.category import Category, Subcategory
from familyvault.models.document import Document
from familyvault.models.folder import Folder


@dataclass(frozen=True)
class CategoryRecord:
    id: str
    user_id: str
    name: str
    icon: str
    icon_bg_color: str | None
    is_custom: bool
    created_at: datetime
    deleted_at: datetime | None

    @classmethod
    def from_row(cls, row: Category) -> CategoryRecord:
        return cls(
            id=row.id,
            user_id=row.user_id,
            name=row.name,
            icon=row.icon,
            icon_bg_color=row.icon_bg_color,
            is_custom=row.is_custom,
            created_at=row.created_at,
            deleted_at=row.deleted_at,
        )


@dataclass(frozen=True)
class SubcategoryRecord:
    id: str
    category_id: str
    user_id: str
    name: str
    icon: str
    is_custom: bool
    created_at: datetime
    deleted_at: datetime | None

    @classmethod
    def from_row(cls, row: Subcategory) -> SubcategoryRecord:
        return cls(
            id=row.id,
            category_id=row.category_id,
            user_id=row.user_id,
            name=row.name,
            icon=row.icon,
            is_custom=row.is_custom,
            created_at=row.created_at,
            deleted_at=row.deleted_at,
        )


@dataclass(frozen=True)
class DocumentRecord:
    id: str
    user_id: str
    category_id: str | None
    subcategory_id: str | None
    folder_id: str | None
    file_name: str
    file_size: int
    file_type: str | None
    storage_path: str
    uploaded_at: datetime
    deleted_at: datetime | None

    @classmethod
    def from_row(cls, row: Document) -> DocumentRecord:
        return cls(
            id=row.id,
            user_id=row.user_id,
            category_id=row.category_id,
            subcategory_id=row.subcategory_id,
            folder_id=row.folder_id,
            file_name=row.file_name,
            file_size=row.file_size,
            file_type=row.file_type,
            storage_path=row.storage_path,
            uploaded_at=row.uploaded_at,
            deleted_at=row.deleted_at,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize for JSON responses."""
        return {
            "id": self.id,
            "category_id": self.category_id,
            "subcategory_id": self.subcategory_id,
            "folder_id": self.folder_id,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "file_type": self.file_type,
            "storage_path": self.storage_path,
            "uploaded_at": self.uploaded_at.isoformat(),
        }


@dataclass(frozen=True)
class FolderRecord:
    id: str
    user_id: str
    category_id: str
    subcategory_id: str
    parent_folder_id: str | None
    name: str
    created_at: datetime
    deleted_at: datetime | None

    @classmethod
    def from_row(cls, row: Folder) -> FolderRecord:
        return cls(
            id=row.id,
            user_id=row.user_id,
            category_id=row.category_id,
            subcategory_id=row.subcategory_id,
            parent_folder_id=row.parent_folder_id,
            name=row.name,
            created_at=row.created_at,
            deleted_at=row.deleted_at,
        )
