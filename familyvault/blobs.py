"""Blob storage for uploaded document bytes."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path, PurePosixPath
from typing import Protocol

import anyio

from familyvault.errors import TransportError

logger = logging.getLogger("familyvault.blobs")


class BlobStore(Protocol):
    async def upload(self, path: str, data: bytes, content_type: str) -> str: ...

    async def remove(self, paths: Sequence[str]) -> None: ...


def _safe_relative(path: str) -> PurePosixPath:
    relative = PurePosixPath(path)
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise ValueError(f"Invalid storage path: {path!r}")
    return relative


class LocalBlobStore:
    """Store blobs under a directory, mirroring a bucket's key layout.

    Content types are kept in a ``.type`` sidecar next to each blob.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def resolve(self, path: str) -> Path:
        return self.root.joinpath(*_safe_relative(path).parts)

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self.resolve(path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            # "xb" refuses to overwrite an existing object.
            with target.open("xb") as handle:
                handle.write(data)
            target.with_name(f"{target.name}.type").write_text(content_type)

        try:
            await anyio.to_thread.run_sync(_write)
        except OSError as exc:
            raise TransportError("blob_upload", str(exc)) from exc

        logger.debug("Stored %d bytes at %s", len(data), path)
        return path

    async def remove(self, paths: Sequence[str]) -> None:
        targets = [self.resolve(path) for path in paths]

        def _unlink() -> None:
            for target in targets:
                target.unlink(missing_ok=True)
                target.with_name(f"{target.name}.type").unlink(missing_ok=True)

        try:
            await anyio.to_thread.run_sync(_unlink)
        except OSError as exc:
            raise TransportError("blob_remove", str(exc)) from exc

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()
