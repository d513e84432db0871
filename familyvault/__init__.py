"""Family Vault: a per-user document taxonomy with soft-delete cascades."""

__version__ = "0.1.0"
