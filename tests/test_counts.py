"""Tests for the single-query document counts."""

from datetime import UTC, datetime

from familyvault.errors import TransportError
from familyvault.models import Document
from familyvault.services.vault import (
    get_all_category_document_counts,
    get_all_subcategory_document_counts,
    get_category_document_count,
    get_subcategory_document_count,
)


async def _add_documents(session_factory, user_id: str, specs) -> None:
    async with session_factory() as session:
        for index, (category_id, subcategory_id, deleted) in enumerate(specs):
            session.add(
                Document(
                    user_id=user_id,
                    category_id=category_id,
                    subcategory_id=subcategory_id,
                    file_name=f"doc-{index}.pdf",
                    file_size=10,
                    file_type="application/pdf",
                    storage_path=f"{user_id}/doc-{index}.pdf",
                    deleted_at=datetime.now(UTC) if deleted else None,
                )
            )
        await session.commit()


async def test_category_counts_tally_live_documents(
    store, session_factory, user_id
) -> None:
    await _add_documents(
        session_factory,
        user_id,
        [
            ("medical", "prescription", False),
            ("medical", "test-reports", False),
            ("personal", "tax", False),
            ("personal", "tax", True),
            (None, None, False),
        ],
    )

    counts = await get_all_category_document_counts(store, user_id)

    assert counts == {"medical": 2, "personal": 1}
    # Sum equals live documents that have a category.
    assert sum(counts.values()) == 3


async def test_subcategory_counts_omit_empty_keys(
    store, session_factory, user_id
) -> None:
    await _add_documents(
        session_factory,
        user_id,
        [("medical", "prescription", False), ("medical", None, False)],
    )

    counts = await get_all_subcategory_document_counts(store, user_id)

    assert counts == {"prescription": 1}
    assert "test-reports" not in counts


async def test_counts_are_scoped_to_user(
    store, session_factory, user_id, other_user_id
) -> None:
    await _add_documents(session_factory, other_user_id, [("medical", None, False)])

    assert await get_all_category_document_counts(store, user_id) == {}
    assert await get_category_document_count(store, "medical", other_user_id) == 1
    assert await get_category_document_count(store, "medical", user_id) == 0


async def test_single_entity_counts(store, session_factory, user_id) -> None:
    await _add_documents(
        session_factory,
        user_id,
        [("medical", "prescription", False), ("medical", "prescription", True)],
    )

    assert await get_category_document_count(store, "medical", user_id) == 1
    assert await get_subcategory_document_count(store, "prescription", user_id) == 1


class BrokenStore:
    async def list_document_keys(self, user_id, column, **filters):
        raise TransportError(f"list_document_keys[{column}]", "connection reset")

    async def count_documents(self, user_id, **filters):
        raise TransportError("count_documents", "connection reset")


async def test_count_failures_degrade_to_empty() -> None:
    store = BrokenStore()

    assert await get_all_category_document_counts(store, "u1") == {}  # type: ignore[arg-type]
    assert await get_all_subcategory_document_counts(store, "u1") == {}  # type: ignore[arg-type]
    assert await get_category_document_count(store, "c", "u1") == 0  # type: ignore[arg-type]
    assert await get_subcategory_document_count(store, "s", "u1") == 0  # type: ignore[arg-type]


async def test_subcategory_counts_scoped_to_category(
    store, session_factory, user_id
) -> None:
    await _add_documents(
        session_factory,
        user_id,
        [
            ("education", "certificates", False),
            ("personal", "certificates", False),
            ("personal", "certificates", False),
        ],
    )

    assert await get_all_subcategory_document_counts(store, user_id) == {
        "certificates": 3
    }
    assert await get_all_subcategory_document_counts(
        store, user_id, "education"
    ) == {"certificates": 1}
    assert (
        await get_subcategory_document_count(
            store, "certificates", user_id, category_id="personal"
        )
        == 2
    )
