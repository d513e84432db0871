"""add folders

Revision ID: 20261018_01
Revises: 20261001_01
Create Date: 2026-10-18 10:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: str | None = "20261001_01"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create folders and point documents.folder_id at them."""
    op.create_table(
        "folders",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("category_id", sa.String(length=64), nullable=False),
        sa.Column("subcategory_id", sa.String(length=64), nullable=False),
        sa.Column("parent_folder_id", sa.String(length=36), nullable=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id", "category_id", "subcategory_id"],
            [
                "subcategories.user_id",
                "subcategories.category_id",
                "subcategories.id",
            ],
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["parent_folder_id"], ["folders.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_folders_user_id"), "folders", ["user_id"], unique=False)
    op.create_index(
        op.f("ix_folders_parent_folder_id"),
        "folders",
        ["parent_folder_id"],
        unique=False,
    )

    # SQLite cannot add a foreign key in place, so the table is rebuilt.
    with op.batch_alter_table("documents", schema=None) as batch_op:
        batch_op.alter_column(
            "folder_id",
            existing_type=sa.String(length=64),
            type_=sa.String(length=36),
            existing_nullable=True,
        )
        batch_op.create_index(
            batch_op.f("ix_documents_folder_id"), ["folder_id"], unique=False
        )
        batch_op.create_foreign_key(
            "fk_documents_folder_id_folders",
            "folders",
            ["folder_id"],
            ["id"],
            ondelete="SET NULL",
        )


def downgrade() -> None:
    with op.batch_alter_table("documents", schema=None) as batch_op:
        batch_op.drop_constraint("fk_documents_folder_id_folders", type_="foreignkey")
        batch_op.drop_index(batch_op.f("ix_documents_folder_id"))
        batch_op.alter_column(
            "folder_id",
            existing_type=sa.String(length=36),
            type_=sa.String(length=64),
            existing_nullable=True,
        )

    op.drop_index(op.f("ix_folders_parent_folder_id"), table_name="folders")
    op.drop_index(op.f("ix_folders_user_id"), table_name="folders")
    op.drop_table("folders")
