"""Access to the logged-in user that scopes every local query."""

from __future__ import annotations

from ..errors import NotAuthenticatedError
from ..store import SessionStore


class SessionHolder:
    """Thin facade over :class:`SessionStore` used by the application layer."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    async def current_user_id(self) -> int | None:
        return await self._store.get_user_id()

    async def require_user_id(self) -> int:
        """Return the stored user id or raise :class:`NotAuthenticatedError`."""
        user_id = await self._store.get_user_id()
        if user_id is None:
            raise NotAuthenticatedError()
        return user_id

    async def is_logged_in(self) -> bool:
        return await self._store.is_logged_in()

    async def save(self, user_id: int) -> None:
        await self._store.save_user_id(user_id)

    async def clear(self) -> None:
        """Forget the user and wipe all locally cached records."""
        await self._store.clear_session()


__all__ = ["SessionHolder"]
