"""Authentication utilities."""

from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from familyvault.config import config
from familyvault.models import User


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def get_password_hash(password: str) -> str:
    """Hash a password."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT whose subject is the user id."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    encoded_jwt: str = jwt.encode(
        {"sub": user_id, "exp": expire}, config.SECRET_KEY, algorithm=config.ALGORITHM
    )
    return encoded_jwt


def decode_access_token(token: str) -> str | None:
    """Decode a JWT access token and return the user id."""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    user_id: str | None = payload.get("sub")
    return user_id


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_active_user(db: AsyncSession, user_id: str) -> User | None:
    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user


async def authenticate_user(
    db: AsyncSession, email: str, password: str
) -> User | None:
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def create_user(db: AsyncSession, email: str, password: str) -> User:
    user = User(email=email, hashed_password=get_password_hash(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


class TokenAuthProvider:
    """Resolve the current user from a bearer token.

    Suitable as the provider behind :class:`IdentityCache`; every call is a
    database round trip.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], token: str | None
    ) -> None:
        self._session_factory = session_factory
        self._token = token

    async def get_current_user(self) -> User | None:
        if not self._token:
            return None
        user_id = decode_access_token(self._token)
        if not user_id:
            return None
        async with self._session_factory() as session:
            return await get_active_user(session, user_id)
