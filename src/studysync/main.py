"""Composition root wiring the store, remote client and repositories."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine

from .core.config import Settings, get_settings
from .core.dispatch import PushDispatcher
from .core.logging import configure_logging
from .db.session import SessionFactory, build_engine, build_session_factory, init_db
from .remote import RemoteClient
from .repositories import DisciplineRepository, ScheduleRepository, TaskRepository
from .services import AuthService, SessionHolder
from .store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StudySyncApp:
    """Everything the presentation layer talks to."""

    settings: Settings
    engine: AsyncEngine
    session_factory: SessionFactory
    remote: RemoteClient
    dispatcher: PushDispatcher
    disciplines: DisciplineRepository
    tasks: TaskRepository
    schedules: ScheduleRepository
    session: SessionHolder
    auth: AuthService

    async def start(self, *, setup_logging: bool = True) -> None:
        """Configure logging and bring the local store up to date."""
        if setup_logging:
            configure_logging(self.settings)
        await init_db(self.engine)
        logger.info(
            "%s %s started (%s)",
            self.settings.project_name,
            self.settings.version,
            self.settings.environment,
        )

    async def aclose(self) -> None:
        """Finish detached pushes, then release the HTTP client and engine."""
        await self.dispatcher.drain()
        await self.remote.aclose()
        await self.engine.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StudySyncApp:
    """Build the application graph; call :meth:`StudySyncApp.start` before use."""
    settings = settings or get_settings()
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    remote = RemoteClient(settings, transport=transport)
    dispatcher = PushDispatcher()

    disciplines = DisciplineRepository(session_factory, remote, dispatcher=dispatcher)
    tasks = TaskRepository(session_factory, remote, dispatcher=dispatcher, settings=settings)
    schedules = ScheduleRepository(
        session_factory, remote, dispatcher=dispatcher, settings=settings
    )
    session = SessionHolder(SessionStore(session_factory))
    auth = AuthService(remote, session, disciplines, schedules, tasks)

    return StudySyncApp(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        remote=remote,
        dispatcher=dispatcher,
        disciplines=disciplines,
        tasks=tasks,
        schedules=schedules,
        session=session,
        auth=auth,
    )


__all__ = ["StudySyncApp", "create_app"]
