"""Document metadata model."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from familyvault.models.base import Base
from familyvault.models.user import new_id

if TYPE_CHECKING:
    from familyvault.models.user import User


class Document(Base):
    """Metadata row for one stored blob."""

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    category_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    subcategory_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )
    folder_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey(
            "folders.id", name="fk_documents_folder_id_folders", ondelete="SET NULL"
        ),
        nullable=True,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255))
    file_size: Mapped[int] = mapped_column(BigInteger, default=0)
    file_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    storage_path: Mapped[str] = mapped_column(String(512), unique=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), index=True
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    owner: Mapped[User] = relationship("User", back_populates="documents")
