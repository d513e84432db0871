"""Tests for soft-delete cascades."""

import pytest
from sqlalchemy import select

from familyvault.errors import DefaultEntityProtected, NotFoundOrForbidden, TransportError
from familyvault.models import Category, Document, Subcategory
from familyvault.services.vault import (
    UploadFileData,
    delete_category_with_cascade,
    delete_custom_category,
    delete_custom_subcategory,
    delete_subcategory_with_cascade,
    get_all_category_document_counts,
    sync_default_categories,
    upload_document,
)


async def test_category_cascade_hides_subcategories_and_documents(
    store, blobs, session_factory, user_id
) -> None:
    await sync_default_categories(store, user_id)
    await upload_document(
        store, blobs, UploadFileData("deed.pdf", b"%PDF"), user_id, "real-estate", "land"
    )
    await upload_document(
        store, blobs, UploadFileData("rx.pdf", b"%PDF"), user_id, "medical"
    )
    assert await get_all_category_document_counts(store, user_id) == {
        "real-estate": 1,
        "medical": 1,
    }

    await delete_category_with_cascade(store, "real-estate", user_id)

    assert await get_all_category_document_counts(store, user_id) == {"medical": 1}
    live_subs = await store.list_user_subcategories(user_id)
    assert not [s for s in live_subs if s.category_id == "real-estate"]
    live_docs = await store.list_user_documents(user_id)
    assert [d.category_id for d in live_docs] == ["medical"]

    # Rows are kept, only stamped.
    async with session_factory() as session:
        category = await session.get(Category, (user_id, "real-estate"))
        assert category is not None
        assert category.deleted_at is not None
        subs = await session.execute(
            select(Subcategory).where(
                Subcategory.user_id == user_id,
                Subcategory.category_id == "real-estate",
            )
        )
        assert all(sub.deleted_at is not None for sub in subs.scalars())


async def test_cascade_rejects_other_users_category(
    store, session_factory, user_id, other_user_id
) -> None:
    await sync_default_categories(store, other_user_id)

    with pytest.raises(NotFoundOrForbidden) as excinfo:
        await delete_category_with_cascade(store, "medical", user_id)
    assert excinfo.value.operation == "delete_category_with_cascade"

    async with session_factory() as session:
        category = await session.get(Category, (other_user_id, "medical"))
        assert category is not None
        assert category.deleted_at is None


async def test_cascade_twice_reports_not_found(store, user_id) -> None:
    custom = await store.create_custom_category(user_id, "Pets")
    await delete_category_with_cascade(store, custom.id, user_id)

    with pytest.raises(NotFoundOrForbidden):
        await delete_category_with_cascade(store, custom.id, user_id)


async def test_subcategory_cascade_only_touches_its_documents(
    store, blobs, session_factory, user_id
) -> None:
    await sync_default_categories(store, user_id)
    # "certificates" exists under both education and personal.
    await upload_document(
        store,
        blobs,
        UploadFileData("degree.pdf", b"1"),
        user_id,
        "education",
        "certificates",
    )
    await upload_document(
        store,
        blobs,
        UploadFileData("birth.pdf", b"2"),
        user_id,
        "personal",
        "certificates",
    )

    await delete_subcategory_with_cascade(store, "certificates", "education", user_id)

    live_docs = await store.list_user_documents(user_id)
    assert [d.file_name for d in live_docs] == ["birth.pdf"]
    live_subs = {(s.category_id, s.id) for s in await store.list_user_subcategories(user_id)}
    assert ("education", "certificates") not in live_subs
    assert ("personal", "certificates") in live_subs

    async with session_factory() as session:
        category = await session.get(Category, (user_id, "education"))
        assert category is not None
        assert category.deleted_at is None
        hidden = await session.execute(
            select(Document).where(Document.file_name == "degree.pdf")
        )
        assert hidden.scalar_one().deleted_at is not None


async def test_subcategory_cascade_unknown_target(store, user_id) -> None:
    with pytest.raises(NotFoundOrForbidden):
        await delete_subcategory_with_cascade(store, "nope", "medical", user_id)


async def test_user_deletes_refuse_template_entities(store, user_id) -> None:
    await sync_default_categories(store, user_id)
    custom = await store.create_custom_subcategory(user_id, "medical", "Dental")

    with pytest.raises(DefaultEntityProtected):
        await delete_custom_category(store, "medical", user_id)
    with pytest.raises(DefaultEntityProtected):
        await delete_custom_subcategory(store, "prescription", "medical", user_id)
    assert await store.get_category(user_id, "medical") is not None

    await delete_custom_subcategory(store, custom.id, "medical", user_id)
    live = await store.list_subcategories(user_id, "medical")
    assert [s.id for s in live if s.is_custom] == []
    assert len(live) == 5


class UnreachableStore:
    async def soft_delete_category(self, category_id, user_id):
        raise TransportError("soft_delete_category", "connection refused")

    async def soft_delete_subcategory(self, subcategory_id, category_id, user_id):
        return None


async def test_transport_errors_propagate_unchanged() -> None:
    store = UnreachableStore()

    with pytest.raises(TransportError) as excinfo:
        await delete_category_with_cascade(store, "medical", "u1")  # type: ignore[arg-type]
    assert excinfo.value.operation == "soft_delete_category"

    with pytest.raises(NotFoundOrForbidden):
        await delete_subcategory_with_cascade(store, "s", "c", "u1")  # type: ignore[arg-type]
