"""Short-lived cache of the signed-in user's id."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

from familyvault.config import config

logger = logging.getLogger("familyvault.identity")


class AuthUser(Protocol):
    id: str


class AuthProvider(Protocol):
    async def get_current_user(self) -> AuthUser | None: ...


class IdentityCache:
    """Remember the authenticated user id for ``ttl`` seconds.

    Only successful lookups are cached. A lookup that raises or finds no user
    leaves the cache empty so the next call asks the provider again.
    """

    def __init__(
        self,
        auth: AuthProvider,
        *,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._auth = auth
        self._ttl = config.IDENTITY_CACHE_TTL_SECONDS if ttl is None else ttl
        self._clock = clock
        self._user_id: str | None = None
        self._fetched_at = 0.0

    async def get_cached_user_id(self) -> str | None:
        now = self._clock()
        if self._user_id is not None and now - self._fetched_at < self._ttl:
            return self._user_id

        user = await self._auth.get_current_user()
        if user is None:
            return None

        self._user_id = user.id
        self._fetched_at = now
        logger.debug("Refreshed cached user id")
        return self._user_id

    def invalidate(self) -> None:
        """Forget the cached id, e.g. after sign-out."""
        self._user_id = None
        self._fetched_at = 0.0
