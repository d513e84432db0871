"""Vault taxonomy routes (JSON)."""

from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from familyvault.blobs import BlobStore
from familyvault.catalog import catalog_position
from familyvault.dependencies import get_blob_store, get_store
from familyvault.errors import NotFoundOrForbidden
from familyvault.models import CategoryRecord, SubcategoryRecord, User
from familyvault.routes.auth import require_auth
from familyvault.services.vault import (
    UploadFileData,
    create_folder,
    delete_custom_category,
    delete_custom_subcategory,
    delete_document,
    delete_folder_with_cascade,
    load_categories_optimized,
    load_folder_contents,
    load_subcategories_optimized,
    sync_default_categories,
    upload_document,
)
from familyvault.services.vault.search import (
    get_all_user_documents,
    get_all_user_subcategories,
    search_documents,
)
from familyvault.store import VaultStore

router = APIRouter(prefix="/vault", tags=["vault"])

StoreDep = Annotated[VaultStore, Depends(get_store)]
BlobsDep = Annotated[BlobStore, Depends(get_blob_store)]
UserDep = Annotated[User, Depends(require_auth)]


def _default_categories(categories: list[CategoryRecord]) -> list[dict[str, Any]]:
    defaults = sorted(
        (c for c in categories if not c.is_custom),
        key=lambda c: catalog_position(c.id),
    )
    return [
        {
            "id": c.id,
            "name": c.name,
            "icon": c.icon,
            "icon_bg_color": c.icon_bg_color,
        }
        for c in defaults
    ]


def _default_subcategories(
    category_id: str, subcategories: list[SubcategoryRecord]
) -> list[dict[str, Any]]:
    defaults = sorted(
        (s for s in subcategories if not s.is_custom),
        key=lambda s: catalog_position(category_id, s.id),
    )
    return [{"id": s.id, "name": s.name, "icon": s.icon} for s in defaults]


@router.post("/sync")
async def sync(store: StoreDep, current_user: UserDep) -> dict[str, Any]:
    """Seed the default taxonomy; a no-op after the first call."""
    result = await sync_default_categories(store, current_user.id)
    return asdict(result)


@router.get("/categories")
async def list_categories(store: StoreDep, current_user: UserDep) -> dict[str, Any]:
    listing, live = await asyncio.gather(
        load_categories_optimized(store, current_user.id),
        store.list_categories(current_user.id),
    )
    return {
        "defaults": _default_categories(live),
        "categories": [asdict(category) for category in listing.categories],
        "doc_counts": listing.doc_counts,
    }


@router.post("/categories", status_code=status.HTTP_201_CREATED)
async def create_category(
    store: StoreDep,
    current_user: UserDep,
    name: Annotated[str, Form(min_length=1, max_length=100)],
    icon: Annotated[str, Form()] = "Folder",
    icon_bg_color: Annotated[str | None, Form()] = None,
) -> dict[str, Any]:
    category = await store.create_custom_category(
        current_user.id, name.strip(), icon=icon, icon_bg_color=icon_bg_color
    )
    return asdict(category)


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str, store: StoreDep, current_user: UserDep
) -> Response:
    await delete_custom_category(store, category_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories/{category_id}/subcategories")
async def list_subcategories(
    category_id: str, store: StoreDep, current_user: UserDep
) -> dict[str, Any]:
    if await store.get_category(current_user.id, category_id) is None:
        raise NotFoundOrForbidden("list_subcategories", "Category not found")

    listing, live = await asyncio.gather(
        load_subcategories_optimized(store, current_user.id, category_id),
        store.list_subcategories(current_user.id, category_id),
    )
    return {
        "defaults": _default_subcategories(category_id, live),
        "subcategories": [asdict(sub) for sub in listing.subcategories],
        "doc_counts": listing.doc_counts,
        "total_doc_count": listing.total_doc_count,
    }


@router.post(
    "/categories/{category_id}/subcategories", status_code=status.HTTP_201_CREATED
)
async def create_subcategory(
    category_id: str,
    store: StoreDep,
    current_user: UserDep,
    name: Annotated[str, Form(min_length=1, max_length=100)],
    icon: Annotated[str, Form()] = "Folder",
) -> dict[str, Any]:
    subcategory = await store.create_custom_subcategory(
        current_user.id, category_id, name.strip(), icon=icon
    )
    return asdict(subcategory)


@router.delete(
    "/categories/{category_id}/subcategories/{subcategory_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_subcategory(
    category_id: str, subcategory_id: str, store: StoreDep, current_user: UserDep
) -> Response:
    await delete_custom_subcategory(
        store, subcategory_id, category_id, current_user.id
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories/{category_id}/subcategories/{subcategory_id}/contents")
async def list_contents(
    category_id: str,
    subcategory_id: str,
    store: StoreDep,
    current_user: UserDep,
    folder_id: Annotated[str | None, Query()] = None,
) -> dict[str, Any]:
    """Folders and documents at the subcategory root or inside ``folder_id``."""
    contents = await load_folder_contents(
        store, current_user.id, category_id, subcategory_id, folder_id or None
    )
    return {
        "folder": asdict(contents.folder) if contents.folder else None,
        "folders": [asdict(folder) for folder in contents.folders],
        "documents": [doc.to_dict() for doc in contents.documents],
    }


@router.post(
    "/categories/{category_id}/subcategories/{subcategory_id}/folders",
    status_code=status.HTTP_201_CREATED,
)
async def create_subcategory_folder(
    category_id: str,
    subcategory_id: str,
    store: StoreDep,
    current_user: UserDep,
    name: Annotated[str, Form()],
    parent_folder_id: Annotated[str | None, Form()] = None,
) -> dict[str, Any]:
    folder = await create_folder(
        store,
        current_user.id,
        category_id,
        subcategory_id,
        name,
        parent_folder_id or None,
    )
    return asdict(folder)


@router.delete("/folders/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(
    folder_id: str, store: StoreDep, current_user: UserDep
) -> Response:
    await delete_folder_with_cascade(store, folder_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/subcategories")
async def list_all_subcategories(
    store: StoreDep, current_user: UserDep
) -> list[dict[str, Any]]:
    subcategories = await get_all_user_subcategories(store, current_user.id)
    return [asdict(sub) for sub in subcategories]


@router.get("/documents")
async def list_documents(
    store: StoreDep, current_user: UserDep, q: str = ""
) -> list[dict[str, object]]:
    documents = await get_all_user_documents(store, current_user.id)
    return [doc.to_dict() for doc in search_documents(documents, q)]


@router.post("/documents", status_code=status.HTTP_201_CREATED)
async def create_document(
    store: StoreDep,
    blobs: BlobsDep,
    current_user: UserDep,
    file: Annotated[UploadFile, File()],
    category_id: Annotated[str | None, Form()] = None,
    subcategory_id: Annotated[str | None, Form()] = None,
    folder_id: Annotated[str | None, Form()] = None,
) -> dict[str, object]:
    content = await file.read()
    document = await upload_document(
        store,
        blobs,
        UploadFileData(
            name=file.filename or "file",
            content=content,
            mime_type=file.content_type,
        ),
        current_user.id,
        category_id=category_id or None,
        subcategory_id=subcategory_id or None,
        folder_id=folder_id or None,
    )
    return document.to_dict()


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_document(
    document_id: str, store: StoreDep, current_user: UserDep
) -> Response:
    await delete_document(store, document_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
