"""HTTP tests for the vault routes."""

from typing import TYPE_CHECKING

from familyvault.services.vault import delete_category_with_cascade

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import async_sessionmaker

    from familyvault.blobs import LocalBlobStore
    from familyvault.store import VaultStore

    TestClientFixture = tuple[
        AsyncClient, async_sessionmaker, str, VaultStore, LocalBlobStore
    ]


async def test_vault_lifecycle(test_client: "TestClientFixture") -> None:
    client, _, _, _, blobs = test_client

    first = await client.post("/vault/sync")
    second = await client.post("/vault/sync")
    assert first.status_code == 200
    assert first.json()["categories_created"] == 5
    assert first.json()["subcategories_created"] == 28
    assert second.json()["skipped"] is True

    upload = await client.post(
        "/vault/documents",
        files={"file": ("lease.pdf", b"%PDF-1.4", "application/pdf")},
        data={"category_id": "real-estate", "subcategory_id": "rental"},
    )
    assert upload.status_code == 201
    document = upload.json()
    assert document["file_name"] == "lease.pdf"
    assert blobs.exists(document["storage_path"])

    listing = await client.get("/vault/categories")
    assert listing.status_code == 200
    body = listing.json()
    assert body["doc_counts"] == {"real-estate": 1}
    assert len(body["defaults"]) == 5
    assert body["categories"] == []

    refused = await client.delete("/vault/categories/real-estate")
    assert refused.status_code == 403
    assert refused.json()["detail"] == "Default categories cannot be deleted"
    listing = await client.get("/vault/categories")
    assert [c["id"] for c in listing.json()["defaults"]] == [
        "real-estate",
        "medical",
        "education",
        "insurance",
        "personal",
    ]

    removed = await client.delete(f"/vault/documents/{document['id']}")
    assert removed.status_code == 204
    listing = await client.get("/vault/categories")
    assert listing.json()["doc_counts"] == {}
    documents = await client.get("/vault/documents")
    assert documents.json() == []
    again = await client.delete(f"/vault/documents/{document['id']}")
    assert again.status_code == 404


async def test_custom_entities_and_subcategory_listing(
    test_client: "TestClientFixture",
) -> None:
    client, _, _, _, _ = test_client
    await client.post("/vault/sync")

    created = await client.post("/vault/categories", data={"name": "Pets"})
    assert created.status_code == 201
    category_id = created.json()["id"]
    assert created.json()["is_custom"] is True

    sub = await client.post(
        f"/vault/categories/{category_id}/subcategories", data={"name": "Vet"}
    )
    assert sub.status_code == 201
    await client.post(
        "/vault/documents",
        files={"file": ("shots.txt", b"rabies", "text/plain")},
        data={"category_id": category_id, "subcategory_id": sub.json()["id"]},
    )

    listing = await client.get(f"/vault/categories/{category_id}/subcategories")
    body = listing.json()
    assert [s["name"] for s in body["subcategories"]] == ["Vet"]
    assert body["defaults"] == []
    assert body["total_doc_count"] == 1
    assert body["doc_counts"] == {sub.json()["id"]: 1}

    medical = await client.get("/vault/categories/medical/subcategories")
    assert len(medical.json()["defaults"]) == 5

    removed = await client.delete(
        f"/vault/categories/{category_id}/subcategories/{sub.json()['id']}"
    )
    assert removed.status_code == 204
    listing = await client.get(f"/vault/categories/{category_id}/subcategories")
    assert listing.json()["subcategories"] == []
    assert listing.json()["total_doc_count"] == 0


async def test_document_search(test_client: "TestClientFixture") -> None:
    client, _, _, _, _ = test_client
    for name in ("Tax Return 2025.pdf", "passport.png"):
        await client.post(
            "/vault/documents", files={"file": (name, b"data", "application/pdf")}
        )

    found = await client.get("/vault/documents", params={"q": "tax"})
    assert [d["file_name"] for d in found.json()] == ["Tax Return 2025.pdf"]
    everything = await client.get("/vault/documents")
    assert len(everything.json()) == 2


async def test_delete_other_users_category_is_404(
    test_client: "TestClientFixture", other_user_id: str
) -> None:
    client, _, _, store, _ = test_client
    theirs = await store.create_custom_category(other_user_id, "Private")

    response = await client.delete(f"/vault/categories/{theirs.id}")

    assert response.status_code == 404
    assert response.json()["operation"] == "delete_category_with_cascade"
    assert [c.id for c in await store.list_custom_categories(other_user_id)] == [
        theirs.id
    ]


async def test_requires_bearer_token(test_client: "TestClientFixture") -> None:
    client, _, _, _, _ = test_client

    response = await client.get(
        "/vault/categories", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401

    response = await client.get("/vault/categories", headers={"Authorization": ""})
    assert response.status_code == 401


async def test_signup_and_login(test_client: "TestClientFixture") -> None:
    client, _, _, _, _ = test_client

    signup = await client.post(
        "/auth/signup", data={"email": "new@example.com", "password": "pw"}
    )
    assert signup.status_code == 201
    user_id = signup.json()["user_id"]

    duplicate = await client.post(
        "/auth/signup", data={"email": "new@example.com", "password": "pw"}
    )
    assert duplicate.status_code == 400

    bad = await client.post(
        "/auth/login", data={"email": "new@example.com", "password": "nope"}
    )
    assert bad.status_code == 401

    login = await client.post(
        "/auth/login", data={"email": "new@example.com", "password": "pw"}
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    response = await client.post(
        "/vault/sync", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert response.json()["categories_created"] == 5
    assert login.json()["user_id"] == user_id


async def test_healthz(test_client: "TestClientFixture") -> None:
    client, _, _, _, _ = test_client
    response = await client.get("/healthz")
    assert response.json() == {"status": "ok"}


async def test_list_all_subcategories(test_client: "TestClientFixture") -> None:
    client, _, _, _, _ = test_client
    await client.post("/vault/sync")

    response = await client.get("/vault/subcategories")

    names = [sub["name"] for sub in response.json()]
    assert len(names) == 28
    assert names == sorted(names)


async def test_deleted_categories_leave_every_listing(
    test_client: "TestClientFixture",
) -> None:
    client, _, user_id, store, _ = test_client
    await client.post("/vault/sync")
    created = await client.post("/vault/categories", data={"name": "Pets"})
    pets = created.json()["id"]

    # Removed outside the HTTP surface, e.g. by an operator.
    await delete_category_with_cascade(store, "real-estate", user_id)
    assert (await client.delete(f"/vault/categories/{pets}")).status_code == 204

    body = (await client.get("/vault/categories")).json()
    assert [c["id"] for c in body["defaults"]] == [
        "medical",
        "education",
        "insurance",
        "personal",
    ]
    assert body["categories"] == []

    for category_id in ("real-estate", pets):
        response = await client.get(f"/vault/categories/{category_id}/subcategories")
        assert response.status_code == 404
        assert response.json()["operation"] == "list_subcategories"


async def test_default_subcategory_delete_is_refused(
    test_client: "TestClientFixture",
) -> None:
    client, _, _, _, _ = test_client
    await client.post("/vault/sync")

    response = await client.delete(
        "/vault/categories/medical/subcategories/prescription"
    )

    assert response.status_code == 403
    listing = await client.get("/vault/categories/medical/subcategories")
    assert [s["id"] for s in listing.json()["defaults"]] == [
        "prescription",
        "test-reports",
        "hospital-records",
        "vaccination",
        "insurance-claims",
    ]


async def test_folders_and_their_documents(test_client: "TestClientFixture") -> None:
    client, _, _, _, _ = test_client
    await client.post("/vault/sync")
    base = "/vault/categories/medical/subcategories/prescription"

    folder = await client.post(f"{base}/folders", data={"name": " Dr. Smith "})
    assert folder.status_code == 201
    folder_id = folder.json()["id"]
    assert folder.json()["name"] == "Dr. Smith"

    duplicate = await client.post(f"{base}/folders", data={"name": "dr. smith"})
    assert duplicate.status_code == 409
    too_short = await client.post(f"{base}/folders", data={"name": "x"})
    assert too_short.status_code == 422
    nested = await client.post(
        f"{base}/folders", data={"name": "2025", "parent_folder_id": folder_id}
    )
    assert nested.status_code == 201

    for name, target in (("root.pdf", None), ("inside.pdf", folder_id)):
        data = {"category_id": "medical", "subcategory_id": "prescription"}
        if target:
            data["folder_id"] = target
        await client.post(
            "/vault/documents",
            files={"file": (name, b"%PDF", "application/pdf")},
            data=data,
        )

    root = (await client.get(f"{base}/contents")).json()
    assert root["folder"] is None
    assert [f["name"] for f in root["folders"]] == ["Dr. Smith"]
    assert [d["file_name"] for d in root["documents"]] == ["root.pdf"]

    response = await client.get(f"{base}/contents", params={"folder_id": folder_id})
    inside = response.json()
    assert inside["folder"]["id"] == folder_id
    assert [f["name"] for f in inside["folders"]] == ["2025"]
    assert [d["file_name"] for d in inside["documents"]] == ["inside.pdf"]

    assert (await client.delete(f"/vault/folders/{folder_id}")).status_code == 204
    gone = await client.get(f"{base}/contents", params={"folder_id": folder_id})
    assert gone.status_code == 404
    root = (await client.get(f"{base}/contents")).json()
    assert root["folders"] == []
    everything = await client.get("/vault/documents")
    assert [d["file_name"] for d in everything.json()] == ["root.pdf"]
