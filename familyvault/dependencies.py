"""FastAPI dependencies for the vault collaborators."""

from familyvault.blobs import BlobStore, LocalBlobStore
from familyvault.config import config
from familyvault.database import AsyncSessionLocal
from familyvault.store import VaultStore


def get_store() -> VaultStore:
    return VaultStore(AsyncSessionLocal)


def get_blob_store() -> BlobStore:
    return LocalBlobStore(config.documents_root())
