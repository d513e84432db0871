"""CLI tool for Family Vault."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import mimetypes
import sys
from pathlib import Path

from sqlalchemy import select

from familyvault.blobs import LocalBlobStore
from familyvault.config import config
from familyvault.database import AsyncSessionLocal, init_db
from familyvault.errors import VaultError
from familyvault.logging_config import configure_logging
from familyvault.models import User
from familyvault.services.identity import IdentityCache
from familyvault.services.vault import (
    UploadFileData,
    delete_custom_category,
    get_all_category_document_counts,
    sync_default_categories,
    upload_document,
)
from familyvault.store import VaultStore
from familyvault.utils.auth import get_password_hash, get_user_by_email


class EmailAuthProvider:
    """Treat the user named on the command line as the signed-in user."""

    def __init__(self, email: str) -> None:
        self.email = email

    async def get_current_user(self) -> User | None:
        async with AsyncSessionLocal() as session:
            return await get_user_by_email(session, self.email)


async def _resolve_user_id(email: str) -> str:
    user_id = await IdentityCache(EmailAuthProvider(email)).get_cached_user_id()
    if user_id is None:
        print(f"User {email} not found.", file=sys.stderr)
        sys.exit(1)
    return user_id


async def upsert_user(email: str, password: str) -> None:
    """Create or update a user with the given credentials."""
    await init_db()
    async with AsyncSessionLocal() as session:
        user = await get_user_by_email(session, email)
        hashed = get_password_hash(password)

        if user:
            user.hashed_password = hashed
            user.is_active = True
            await session.commit()
            print(f"Updated password for existing user {email}")
            return

        new_user = User(email=email, hashed_password=hashed, is_active=True)
        session.add(new_user)
        await session.commit()
        print(f"Created user {email} ({new_user.id})")


async def list_users() -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).order_by(User.created_at))
        for user in result.scalars():
            print(f"ID: {user.id}, Email: {user.email}, Active: {user.is_active}")


async def vault_sync(email: str) -> None:
    await init_db()
    user_id = await _resolve_user_id(email)
    result = await sync_default_categories(VaultStore(AsyncSessionLocal), user_id)
    if result.skipped:
        print("Default categories already present.")
    else:
        print(
            f"Seeded {result.categories_created} categories and "
            f"{result.subcategories_created} subcategories."
        )


async def vault_counts(email: str) -> None:
    await init_db()
    user_id = await _resolve_user_id(email)
    counts = await get_all_category_document_counts(
        VaultStore(AsyncSessionLocal), user_id
    )
    print(json.dumps(counts, indent=2, sort_keys=True))


async def vault_upload(
    email: str,
    path: Path,
    category_id: str | None,
    subcategory_id: str | None,
) -> None:
    if not path.is_file():
        print(f"File {path} not found.", file=sys.stderr)
        sys.exit(1)

    await init_db()
    user_id = await _resolve_user_id(email)
    mime_type, _ = mimetypes.guess_type(path.name)
    document = await upload_document(
        VaultStore(AsyncSessionLocal),
        LocalBlobStore(config.documents_root()),
        UploadFileData(name=path.name, content=path.read_bytes(), mime_type=mime_type),
        user_id,
        category_id=category_id,
        subcategory_id=subcategory_id,
    )
    print(json.dumps(document.to_dict(), indent=2))


async def vault_delete_category(email: str, category_id: str) -> None:
    await init_db()
    user_id = await _resolve_user_id(email)
    await delete_custom_category(VaultStore(AsyncSessionLocal), category_id, user_id)
    print(f"Deleted category {category_id}")


def prompt_password(confirm: bool = True) -> str:
    """Prompt for a password."""
    first = getpass.getpass("Password: ")
    if not confirm:
        return first

    second = getpass.getpass("Confirm password: ")
    if first != second:
        print("Passwords do not match.", file=sys.stderr)
        sys.exit(1)
    if not first:
        print("Password cannot be empty.", file=sys.stderr)
        sys.exit(1)
    return first


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Family Vault CLI tool.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    user_parser = subparsers.add_parser("user", help="Manage users")
    user_subparsers = user_parser.add_subparsers(dest="user_command", required=True)
    create_parser = user_subparsers.add_parser("create", help="Create or update a user")
    create_parser.add_argument("--email", required=True, help="User email")
    create_parser.add_argument("--password", help="Password (omit to prompt)")
    user_subparsers.add_parser("list", help="List all users")

    vault_parser = subparsers.add_parser("vault", help="Work with a user's vault")
    vault_parser.add_argument("--email", required=True, help="User email")
    vault_subparsers = vault_parser.add_subparsers(dest="vault_command", required=True)
    vault_subparsers.add_parser("sync", help="Seed default categories")
    vault_subparsers.add_parser("counts", help="Print document counts per category")

    upload_parser = vault_subparsers.add_parser("upload", help="Upload a document")
    upload_parser.add_argument("path", type=Path, help="File to upload")
    upload_parser.add_argument("--category", help="Category id")
    upload_parser.add_argument("--subcategory", help="Subcategory id")

    delete_parser = vault_subparsers.add_parser(
        "delete-category", help="Soft-delete a custom category and its contents"
    )
    delete_parser.add_argument("category_id", help="Category id")

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(debug=config.DEBUG)

    try:
        if args.command == "user":
            if args.user_command == "create":
                password = args.password or prompt_password()
                asyncio.run(upsert_user(args.email, password))
            elif args.user_command == "list":
                asyncio.run(list_users())
        elif args.command == "vault":
            if args.vault_command == "sync":
                asyncio.run(vault_sync(args.email))
            elif args.vault_command == "counts":
                asyncio.run(vault_counts(args.email))
            elif args.vault_command == "upload":
                asyncio.run(
                    vault_upload(
                        args.email, args.path, args.category, args.subcategory
                    )
                )
            elif args.vault_command == "delete-category":
                asyncio.run(vault_delete_category(args.email, args.category_id))
    except VaultError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
