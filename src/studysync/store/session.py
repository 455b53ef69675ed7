"""Storage for the single logged-in user row."""

from __future__ import annotations

import logging

from sqlalchemy import delete
from sqlmodel import select

from ..db.session import SessionFactory
from ..models import ENTITY_MODELS, UserSession

logger = logging.getLogger(__name__)


class SessionStore:
    """Persist the current user id; at most one row ever exists."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    async def save_user_id(self, user_id: int) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(UserSession))
            session.add(UserSession(user_id=user_id))
            await session.commit()

    async def get_user_id(self) -> int | None:
        async with self._session_factory() as session:
            result = await session.exec(select(UserSession.user_id))
            return result.first()

    async def is_logged_in(self) -> bool:
        return await self.get_user_id() is not None

    async def clear_session(self) -> None:
        """Remove the session row and wipe every entity table.

        The wipe is not scoped to the stored user; the device only ever holds
        one account's data.
        """
        async with self._session_factory() as session:
            await session.execute(delete(UserSession))
            for model in ENTITY_MODELS:
                await session.execute(delete(model))
            await session.commit()
        logger.info("Session cleared and local tables purged")


__all__ = ["SessionStore"]
