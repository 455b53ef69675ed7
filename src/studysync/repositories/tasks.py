"""Task repository."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from ..core.config import Settings
from ..core.dispatch import PushDispatcher
from ..core.timeparse import parse_due_date
from ..db.session import SessionFactory
from ..errors import PreconditionError
from ..models import Task
from ..remote import RemoteClient, RemoteResult, RemoteTask, TaskPayload
from ..schemas import TaskFields, TaskView
from ..store import TaskStore
from .linked import DisciplineLinkedRepository


class TaskRepository(
    DisciplineLinkedRepository[Task, TaskFields, TaskView, TaskPayload, RemoteTask]
):
    """Tasks must belong to a discipline that already exists on the server."""

    entity_name = "task"

    def __init__(
        self,
        session_factory: SessionFactory,
        remote: RemoteClient,
        *,
        dispatcher: PushDispatcher | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(
            TaskStore(session_factory),
            remote.tasks,
            session_factory,
            dispatcher=dispatcher,
            settings=settings,
        )
        self._remote = remote

    async def _check_create(self, owner_id: int, fields: TaskFields) -> None:
        discipline = await self._owned_discipline(owner_id, fields.discipline_id)
        if discipline is None:
            raise PreconditionError(
                "A task needs one of your own disciplines.",
                details={"discipline_id": fields.discipline_id, "owner_id": owner_id},
            )
        if discipline.remote_id is None:
            raise PreconditionError(
                "A task needs a discipline that is already synced with the server.",
                details={"discipline_id": fields.discipline_id},
            )

    async def _build_payload(self, record: Task) -> TaskPayload | None:
        discipline_remote_id = await self._remote_discipline_id(
            record.owner_id, record.discipline_id
        )
        if discipline_remote_id is None:
            return None
        return TaskPayload(
            owner_id=record.owner_id,
            title=record.title,
            description=record.description,
            completed=record.completed,
            discipline_id=discipline_remote_id,
            due_date=record.due_date,
        )

    def _values_from_remote(self, remote: RemoteTask, context: Mapping[int, int]) -> dict[str, Any]:
        return {
            "title": remote.title,
            "description": remote.description,
            "completed": remote.completed,
            "due_date": remote.due_date,
            "discipline_id": context.get(remote.discipline_id),
        }

    async def _materialize(self, owner_id: int, records: Sequence[Task]) -> list[TaskView]:
        index = await self._discipline_index(owner_id)
        views = []
        for record in records:
            discipline = self._display(index, record.discipline_id)
            views.append(
                TaskView(
                    id=record.id,
                    remote_id=record.remote_id,
                    owner_id=record.owner_id,
                    title=record.title,
                    description=record.description,
                    completed=record.completed,
                    due_date=record.due_date,
                    due_at=parse_due_date(record.due_date),
                    discipline_local_id=discipline.local_id,
                    discipline_id=discipline.remote_id,
                    discipline_name=discipline.name,
                    discipline_color=discipline.color,
                    synced=record.synced,
                    sync_state=record.sync_state,
                )
            )
        return views

    async def list_remote_filtered(
        self,
        owner_id: int,
        *,
        discipline_id: int | None = None,
        completed: bool | None = None,
        due_from: datetime | None = None,
        due_until: datetime | None = None,
    ) -> RemoteResult[list[RemoteTask]]:
        """Query the server directly with its task filters.

        ``discipline_id`` is a local id and is translated to the remote one;
        an unsynced discipline yields an empty result without a request.
        """
        remote_discipline_id = None
        if discipline_id is not None:
            remote_discipline_id = await self._remote_discipline_id(owner_id, discipline_id)
            if remote_discipline_id is None:
                return RemoteResult(success=True, status_code=200, data=[])
        return await self._remote.tasks.list(
            owner_id,
            discipline_id=remote_discipline_id,
            completed=completed,
            due_from=due_from,
            due_until=due_until,
        )


__all__ = ["TaskRepository"]
