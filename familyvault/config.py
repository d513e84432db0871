"""Configuration management for Family Vault."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration."""

    # Application
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    PORT: int = int(os.getenv("PORT", "7675"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./familyvault.db")

    # Blob storage
    MEDIA_ROOT: Path = Path(os.getenv("MEDIA_ROOT", "./media"))
    DOCUMENTS_BUCKET: str = os.getenv("DOCUMENTS_BUCKET", "documents")

    # Identity
    IDENTITY_CACHE_TTL_SECONDS: float = float(
        os.getenv("IDENTITY_CACHE_TTL_SECONDS", "300")
    )

    # Features
    FEATURE_SIGNUP_ENABLED: bool = (
        os.getenv("FEATURE_SIGNUP_ENABLED", "true").lower() == "true"
    )

    # Auth
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 1 week
    ALGORITHM: str = "HS256"

    @classmethod
    def documents_root(cls) -> Path:
        """Directory holding uploaded document blobs."""
        return cls.MEDIA_ROOT / cls.DOCUMENTS_BUCKET

    @classmethod
    def ensure_media_dirs(cls) -> None:
        """Ensure media directories exist."""
        cls.MEDIA_ROOT.mkdir(parents=True, exist_ok=True)
        cls.documents_root().mkdir(exist_ok=True)


config = Config()
