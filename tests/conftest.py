import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker

from familyvault.blobs import LocalBlobStore
from familyvault.config import config
from familyvault.database import build_engine, get_db
from familyvault.dependencies import get_blob_store, get_store
from familyvault.main import app
from familyvault.models import Base, User
from familyvault.store import VaultStore
from familyvault.utils.auth import create_access_token, get_password_hash


@pytest.fixture
async def session_factory(tmp_path):
    # A file database lets concurrent sessions see each other's commits.
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'vault.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


async def _create_user(factory, email: str) -> str:
    async with factory() as session:
        user = User(email=email, hashed_password=get_password_hash("secret"))
        session.add(user)
        await session.commit()
        return user.id


@pytest.fixture
async def user_id(session_factory) -> str:
    return await _create_user(session_factory, "tester@example.com")


@pytest.fixture
async def other_user_id(session_factory) -> str:
    return await _create_user(session_factory, "other@example.com")


@pytest.fixture
def store(session_factory) -> VaultStore:
    return VaultStore(session_factory)


@pytest.fixture
def blobs(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "media" / "documents")


@pytest.fixture
async def test_client(
    tmp_path, session_factory, user_id, store, blobs
) -> tuple[AsyncClient, async_sessionmaker, str, VaultStore, LocalBlobStore]:
    original_media_root = config.MEDIA_ROOT
    config.MEDIA_ROOT = tmp_path / "media"
    config.ensure_media_dirs()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_blob_store] = lambda: blobs

    transport = ASGITransport(app=app)
    headers = {"Authorization": f"Bearer {create_access_token(user_id)}"}
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=headers
    ) as client:
        yield client, session_factory, user_id, store, blobs

    app.dependency_overrides.clear()
    config.MEDIA_ROOT = original_media_root
