"""Relational store for the vault taxonomy.

Each public coroutine is one round trip: it opens its own session, runs its
statements and returns typed records. SQLAlchemy failures are translated into
the vault error taxonomy here so the services never see driver exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, Literal

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from familyvault.errors import (
    DuplicateKeyError,
    NameConflict,
    NotFoundOrForbidden,
    TransportError,
)
from familyvault.models import (
    Category,
    CategoryRecord,
    Document,
    DocumentRecord,
    Folder,
    FolderRecord,
    Subcategory,
    SubcategoryRecord,
    new_id,
)

logger = logging.getLogger("familyvault.store")

DocumentKey = Literal["category_id", "subcategory_id"]

_PG_UNIQUE_VIOLATION = "23505"


def is_duplicate_key(exc: IntegrityError) -> bool:
    """Tell unique/primary-key collisions apart from other integrity errors."""
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return str(code) == _PG_UNIQUE_VIOLATION
    message = str(orig)
    return "UNIQUE constraint failed" in message or "duplicate key" in message


class VaultStore:
    """SQLAlchemy-backed implementation of the vault's remote store."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateKeyError(operation, str(exc.orig)) from exc
            raise TransportError(operation, str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.warning("%s failed: %s", operation, exc)
            raise TransportError(operation, str(exc)) from exc

    # Seeding

    async def count_default_categories(self, user_id: str) -> int:
        """Count template-derived categories, including soft-deleted ones."""
        async with self._session("count_default_categories") as session:
            result = await session.execute(
                select(func.count())
                .select_from(Category)
                .where(Category.user_id == user_id, Category.is_custom.is_(False))
            )
            return int(result.scalar_one())

    async def insert_categories(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """Insert all rows in one statement; all or nothing."""
        if not rows:
            return 0
        async with self._session("insert_categories") as session:
            await session.execute(insert(Category), [dict(row) for row in rows])
            await session.commit()
        return len(rows)

    async def insert_subcategories(self, rows: Sequence[Mapping[str, Any]]) -> int:
        """Insert all rows in one statement; all or nothing."""
        if not rows:
            return 0
        async with self._session("insert_subcategories") as session:
            await session.execute(insert(Subcategory), [dict(row) for row in rows])
            await session.commit()
        return len(rows)

    # Counting

    async def list_document_keys(
        self, user_id: str, column: DocumentKey, *, category_id: str | None = None
    ) -> list[str | None]:
        """Project one foreign key of every live document of the user.

        Subcategory ids repeat across categories, so subcategory tallies pass
        ``category_id`` to stay within one parent.
        """
        key = getattr(Document, column)
        query = select(key).where(
            Document.user_id == user_id, Document.deleted_at.is_(None)
        )
        if category_id is not None:
            query = query.where(Document.category_id == category_id)

        async with self._session(f"list_document_keys[{column}]") as session:
            result = await session.execute(query)
            return list(result.scalars())

    async def count_documents(
        self,
        user_id: str,
        *,
        category_id: str | None = None,
        subcategory_id: str | None = None,
    ) -> int:
        query = (
            select(func.count())
            .select_from(Document)
            .where(Document.user_id == user_id, Document.deleted_at.is_(None))
        )
        if category_id is not None:
            query = query.where(Document.category_id == category_id)
        if subcategory_id is not None:
            query = query.where(Document.subcategory_id == subcategory_id)

        async with self._session("count_documents") as session:
            result = await session.execute(query)
            return int(result.scalar_one())

    # Listing

    async def list_custom_categories(self, user_id: str) -> list[CategoryRecord]:
        async with self._session("list_custom_categories") as session:
            result = await session.execute(
                select(Category)
                .where(
                    Category.user_id == user_id,
                    Category.is_custom.is_(True),
                    Category.deleted_at.is_(None),
                )
                .order_by(Category.created_at.asc())
            )
            return [CategoryRecord.from_row(row) for row in result.scalars()]

    async def list_custom_subcategories(
        self, user_id: str, category_id: str
    ) -> list[SubcategoryRecord]:
        async with self._session("list_custom_subcategories") as session:
            result = await session.execute(
                select(Subcategory)
                .where(
                    Subcategory.user_id == user_id,
                    Subcategory.category_id == category_id,
                    Subcategory.is_custom.is_(True),
                    Subcategory.deleted_at.is_(None),
                )
                .order_by(Subcategory.created_at.asc())
            )
            return [SubcategoryRecord.from_row(row) for row in result.scalars()]

    async def list_categories(self, user_id: str) -> list[CategoryRecord]:
        """All live categories, template-derived first."""
        async with self._session("list_categories") as session:
            result = await session.execute(
                select(Category)
                .where(Category.user_id == user_id, Category.deleted_at.is_(None))
                .order_by(Category.is_custom.asc(), Category.created_at.asc())
            )
            return [CategoryRecord.from_row(row) for row in result.scalars()]

    async def get_category(
        self, user_id: str, category_id: str
    ) -> CategoryRecord | None:
        """The live category with that id, or ``None``."""
        async with self._session("get_category") as session:
            result = await session.execute(
                select(Category).where(
                    Category.user_id == user_id,
                    Category.id == category_id,
                    Category.deleted_at.is_(None),
                )
            )
            row = result.scalar_one_or_none()
            return CategoryRecord.from_row(row) if row is not None else None

    async def list_subcategories(
        self, user_id: str, category_id: str
    ) -> list[SubcategoryRecord]:
        """All live subcategories of one category, template-derived first."""
        async with self._session("list_subcategories") as session:
            result = await session.execute(
                select(Subcategory)
                .where(
                    Subcategory.user_id == user_id,
                    Subcategory.category_id == category_id,
                    Subcategory.deleted_at.is_(None),
                )
                .order_by(Subcategory.is_custom.asc(), Subcategory.created_at.asc())
            )
            return [SubcategoryRecord.from_row(row) for row in result.scalars()]

    async def list_user_subcategories(self, user_id: str) -> list[SubcategoryRecord]:
        async with self._session("list_user_subcategories") as session:
            result = await session.execute(
                select(Subcategory)
                .where(
                    Subcategory.user_id == user_id, Subcategory.deleted_at.is_(None)
                )
                .order_by(Subcategory.name.asc())
            )
            return [SubcategoryRecord.from_row(row) for row in result.scalars()]

    async def list_user_documents(self, user_id: str) -> list[DocumentRecord]:
        async with self._session("list_user_documents") as session:
            result = await session.execute(
                select(Document)
                .where(Document.user_id == user_id, Document.deleted_at.is_(None))
                .order_by(Document.uploaded_at.desc())
            )
            return [DocumentRecord.from_row(row) for row in result.scalars()]

    # Writes

    async def insert_document(self, values: Mapping[str, Any]) -> DocumentRecord:
        async with self._session("insert_document") as session:
            document = Document(**values)
            session.add(document)
            await session.commit()
            return DocumentRecord.from_row(document)

    async def create_custom_category(
        self,
        user_id: str,
        name: str,
        *,
        icon: str = "Folder",
        icon_bg_color: str | None = None,
    ) -> CategoryRecord:
        async with self._session("create_custom_category") as session:
            category = Category(
                id=new_id(),
                user_id=user_id,
                name=name,
                icon=icon,
                icon_bg_color=icon_bg_color,
                is_custom=True,
            )
            session.add(category)
            await session.commit()
            return CategoryRecord.from_row(category)

    async def create_custom_subcategory(
        self,
        user_id: str,
        category_id: str,
        name: str,
        *,
        icon: str = "Folder",
    ) -> SubcategoryRecord:
        operation = "create_custom_subcategory"
        async with self._session(operation) as session:
            parent = await session.execute(
                select(Category.id).where(
                    Category.user_id == user_id,
                    Category.id == category_id,
                    Category.deleted_at.is_(None),
                )
            )
            if parent.scalar_one_or_none() is None:
                raise NotFoundOrForbidden(operation, "Category not found")

            subcategory = Subcategory(
                id=new_id(),
                category_id=category_id,
                user_id=user_id,
                name=name,
                icon=icon,
                is_custom=True,
            )
            session.add(subcategory)
            await session.commit()
            return SubcategoryRecord.from_row(subcategory)

    # Cascades

    async def soft_delete_category(self, category_id: str, user_id: str) -> bool:
        """Soft-delete a category with its subcategories, folders and documents.

        All updates share one transaction. Returns ``False`` when no live
        category with that id belongs to the user.
        """
        now = datetime.now(UTC)
        async with self._session("soft_delete_category") as session:
            async with session.begin():
                target = await session.execute(
                    update(Category)
                    .where(
                        Category.user_id == user_id,
                        Category.id == category_id,
                        Category.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
                if target.rowcount == 0:
                    return False

                await session.execute(
                    update(Subcategory)
                    .where(
                        Subcategory.user_id == user_id,
                        Subcategory.category_id == category_id,
                        Subcategory.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
                await session.execute(
                    update(Folder)
                    .where(
                        Folder.user_id == user_id,
                        Folder.category_id == category_id,
                        Folder.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
                await session.execute(
                    update(Document)
                    .where(
                        Document.user_id == user_id,
                        Document.category_id == category_id,
                        Document.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
            return True

    async def soft_delete_subcategory(
        self, subcategory_id: str, category_id: str, user_id: str
    ) -> bool:
        """Soft-delete a subcategory, its folders and its documents atomically."""
        now = datetime.now(UTC)
        async with self._session("soft_delete_subcategory") as session:
            async with session.begin():
                target = await session.execute(
                    update(Subcategory)
                    .where(
                        Subcategory.user_id == user_id,
                        Subcategory.category_id == category_id,
                        Subcategory.id == subcategory_id,
                        Subcategory.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
                if target.rowcount == 0:
                    return False

                await session.execute(
                    update(Folder)
                    .where(
                        Folder.user_id == user_id,
                        Folder.category_id == category_id,
                        Folder.subcategory_id == subcategory_id,
                        Folder.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
                await session.execute(
                    update(Document)
                    .where(
                        Document.user_id == user_id,
                        Document.category_id == category_id,
                        Document.subcategory_id == subcategory_id,
                        Document.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
            return True

    # Folders

    async def get_folder(self, user_id: str, folder_id: str) -> FolderRecord | None:
        async with self._session("get_folder") as session:
            result = await session.execute(
                select(Folder).where(
                    Folder.user_id == user_id,
                    Folder.id == folder_id,
                    Folder.deleted_at.is_(None),
                )
            )
            row = result.scalar_one_or_none()
            return FolderRecord.from_row(row) if row is not None else None

    async def create_folder(
        self,
        user_id: str,
        category_id: str,
        subcategory_id: str,
        name: str,
        *,
        parent_folder_id: str | None = None,
    ) -> FolderRecord:
        """Create a folder under a live subcategory or a live parent folder.

        Raises:
            NotFoundOrForbidden: The subcategory or parent folder is missing,
                deleted, or owned by someone else.
            NameConflict: A live sibling already has that name, ignoring case.
        """
        operation = "create_folder"
        async with self._session(operation) as session:
            parent = await session.execute(
                select(Subcategory.id).where(
                    Subcategory.user_id == user_id,
                    Subcategory.category_id == category_id,
                    Subcategory.id == subcategory_id,
                    Subcategory.deleted_at.is_(None),
                )
            )
            if parent.scalar_one_or_none() is None:
                raise NotFoundOrForbidden(operation, "Subcategory not found")

            if parent_folder_id is not None:
                folder = await session.execute(
                    select(Folder.id).where(
                        Folder.user_id == user_id,
                        Folder.id == parent_folder_id,
                        Folder.category_id == category_id,
                        Folder.subcategory_id == subcategory_id,
                        Folder.deleted_at.is_(None),
                    )
                )
                if folder.scalar_one_or_none() is None:
                    raise NotFoundOrForbidden(operation, "Parent folder not found")

            siblings = await session.execute(
                select(func.count())
                .select_from(Folder)
                .where(
                    Folder.user_id == user_id,
                    Folder.category_id == category_id,
                    Folder.subcategory_id == subcategory_id,
                    Folder.parent_folder_id.is_(None)
                    if parent_folder_id is None
                    else Folder.parent_folder_id == parent_folder_id,
                    func.lower(Folder.name) == name.lower(),
                    Folder.deleted_at.is_(None),
                )
            )
            if siblings.scalar_one() > 0:
                raise NameConflict(operation, "Folder already exists")

            row = Folder(
                user_id=user_id,
                category_id=category_id,
                subcategory_id=subcategory_id,
                parent_folder_id=parent_folder_id,
                name=name,
            )
            session.add(row)
            await session.commit()
            return FolderRecord.from_row(row)

    async def list_folders(
        self,
        user_id: str,
        category_id: str,
        subcategory_id: str,
        parent_folder_id: str | None = None,
    ) -> list[FolderRecord]:
        """Live folders directly under a subcategory root or a parent folder."""
        if parent_folder_id is None:
            level = Folder.parent_folder_id.is_(None)
        else:
            level = Folder.parent_folder_id == parent_folder_id
        async with self._session("list_folders") as session:
            result = await session.execute(
                select(Folder)
                .where(
                    Folder.user_id == user_id,
                    Folder.category_id == category_id,
                    Folder.subcategory_id == subcategory_id,
                    level,
                    Folder.deleted_at.is_(None),
                )
                .order_by(Folder.name.asc())
            )
            return [FolderRecord.from_row(row) for row in result.scalars()]

    async def list_folder_documents(
        self,
        user_id: str,
        category_id: str,
        subcategory_id: str,
        folder_id: str | None = None,
    ) -> list[DocumentRecord]:
        """Live documents at a subcategory root (no folder) or inside one folder."""
        query = select(Document).where(
            Document.user_id == user_id, Document.deleted_at.is_(None)
        )
        if folder_id is None:
            query = query.where(
                Document.category_id == category_id,
                Document.subcategory_id == subcategory_id,
                Document.folder_id.is_(None),
            )
        else:
            query = query.where(Document.folder_id == folder_id)

        async with self._session("list_folder_documents") as session:
            result = await session.execute(
                query.order_by(Document.uploaded_at.desc())
            )
            return [DocumentRecord.from_row(row) for row in result.scalars()]

    async def soft_delete_folder(self, folder_id: str, user_id: str) -> bool:
        """Soft-delete a folder, every folder nested in it and their documents.

        Returns ``False`` when no live folder with that id belongs to the user.
        """
        now = datetime.now(UTC)
        async with self._session("soft_delete_folder") as session:
            async with session.begin():
                target = await session.execute(
                    update(Folder)
                    .where(
                        Folder.user_id == user_id,
                        Folder.id == folder_id,
                        Folder.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
                if target.rowcount == 0:
                    return False

                doomed = [folder_id]
                frontier = [folder_id]
                while frontier:
                    children = await session.execute(
                        select(Folder.id).where(
                            Folder.user_id == user_id,
                            Folder.parent_folder_id.in_(frontier),
                            Folder.deleted_at.is_(None),
                        )
                    )
                    frontier = list(children.scalars())
                    doomed.extend(frontier)

                if len(doomed) > 1:
                    await session.execute(
                        update(Folder)
                        .where(Folder.user_id == user_id, Folder.id.in_(doomed[1:]))
                        .values(deleted_at=now)
                        .execution_options(synchronize_session=False)
                    )
                await session.execute(
                    update(Document)
                    .where(
                        Document.user_id == user_id,
                        Document.folder_id.in_(doomed),
                        Document.deleted_at.is_(None),
                    )
                    .values(deleted_at=now)
                    .execution_options(synchronize_session=False)
                )
            return True

    # Documents

    async def soft_delete_document(self, document_id: str, user_id: str) -> bool:
        async with self._session("soft_delete_document") as session:
            result = await session.execute(
                update(Document)
                .where(
                    Document.user_id == user_id,
                    Document.id == document_id,
                    Document.deleted_at.is_(None),
                )
                .values(deleted_at=datetime.now(UTC))
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount > 0
