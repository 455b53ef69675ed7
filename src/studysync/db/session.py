"""Database engine, session factories and schema upgrades."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import sqlalchemy as sa
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..models import ENTITY_MODELS, UserSession
from .base import SCHEMA_VERSION, SQLModel

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine backing the local store."""

    return create_async_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> SessionFactory:
    """Return a factory yielding one short-lived session per call."""

    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def factory() -> AsyncIterator[AsyncSession]:
        async with maker() as session:
            yield session

    return factory


def _read_schema_version(connection: Connection) -> int:
    return int(connection.exec_driver_sql("PRAGMA user_version").scalar_one())


def upgrade_schema(connection: Connection) -> None:
    """Create missing tables and apply the destructive upgrade policy.

    Entity tables written by an older schema version are dropped and
    recreated, discarding any rows that were never pushed. The session table
    is left alone so the user stays logged in.
    """

    current = _read_schema_version(connection)
    inspector = sa.inspect(connection)
    entity_tables = [model.__table__ for model in ENTITY_MODELS]  # type: ignore[attr-defined]
    has_entity_tables = any(inspector.has_table(table.name) for table in entity_tables)

    if has_entity_tables and current < SCHEMA_VERSION:
        logger.warning(
            "Local schema version %s is older than %s; recreating entity tables.",
            current,
            SCHEMA_VERSION,
        )
        for table in reversed(entity_tables):
            table.drop(connection, checkfirst=True)

    SQLModel.metadata.create_all(connection, tables=[*entity_tables, UserSession.__table__])  # type: ignore[attr-defined]
    if current != SCHEMA_VERSION:
        connection.exec_driver_sql(f"PRAGMA user_version = {SCHEMA_VERSION}")


async def init_db(engine: AsyncEngine) -> None:
    """Bring the local store up to the current schema version."""

    async with engine.begin() as connection:
        await connection.run_sync(upgrade_schema)


__all__ = [
    "SessionFactory",
    "build_engine",
    "build_session_factory",
    "init_db",
    "upgrade_schema",
]
