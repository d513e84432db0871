"""Folder model."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, ForeignKeyConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from familyvault.models.base import Base
from familyvault.models.user import new_id


class Folder(Base):
    """User-created folder inside a subcategory; folders nest via a parent id."""

    __tablename__ = "folders"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id", "category_id", "subcategory_id"],
            ["subcategories.user_id", "subcategories.category_id", "subcategories.id"],
            ondelete="CASCADE",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    category_id: Mapped[str] = mapped_column(String(64))
    subcategory_id: Mapped[str] = mapped_column(String(64))
    parent_folder_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("folders.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
