"""Error taxonomy for vault operations.

Every error raised out of the vault core carries the name of the failing
operation so callers can render an actionable message.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base class for vault failures."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class TransientConflict(VaultError):
    """A write collided with a row another caller already created."""


class DuplicateKeyError(TransientConflict):
    """The store rejected an insert because the primary key already exists."""


class NotFoundOrForbidden(VaultError):
    """The target does not exist or is not owned by the caller."""


class TransportError(VaultError):
    """The remote store or blob store failed to answer."""


class CompensationFailure(VaultError):
    """Cleanup after a failed two-phase write did not complete.

    Only ever logged; the error that triggered the cleanup is what surfaces.
    """


class SyncError(VaultError):
    """Seeding default categories failed."""


class UploadError(VaultError):
    """Storing a document blob failed."""


class DefaultEntityProtected(VaultError):
    """Template-derived categories and subcategories cannot be deleted."""


class InvalidName(VaultError):
    """A user-supplied name failed validation."""


class NameConflict(VaultError):
    """A live sibling already uses this name (compared case-insensitively)."""
