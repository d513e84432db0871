"""User model."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from familyvault.models.base import Base

if TYPE_CHECKING:
    from familyvault.models.category import Category
    from familyvault.models.document import Document


def new_id() -> str:
    """Opaque primary key for users, custom rows and documents."""
    return uuid.uuid4().hex


class User(Base):
    """Tenancy boundary for every other vault row."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC)
    )

    categories: Mapped[list[Category]] = relationship(
        "Category", back_populates="owner", cascade="all, delete-orphan"
    )
    documents: Mapped[list[Document]] = relationship(
        "Document", back_populates="owner", cascade="all, delete-orphan"
    )
