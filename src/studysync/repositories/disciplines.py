"""Discipline repository."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..core.dispatch import PushDispatcher
from ..db.session import SessionFactory
from ..models import Discipline
from ..remote import DisciplinePayload, RemoteClient, RemoteDiscipline
from ..schemas import DisciplineFields, DisciplineView
from ..store import DisciplineStore
from .base import SyncRepository


class DisciplineRepository(
    SyncRepository[Discipline, DisciplineFields, DisciplineView, DisciplinePayload, RemoteDiscipline]
):
    """Disciplines are the parents of tasks and schedules.

    On pull, a local discipline that was never pushed is linked to a remote
    one with exactly the same name instead of being duplicated.
    """

    entity_name = "discipline"

    def __init__(
        self,
        session_factory: SessionFactory,
        remote: RemoteClient,
        *,
        dispatcher: PushDispatcher | None = None,
    ) -> None:
        super().__init__(
            DisciplineStore(session_factory),
            remote.disciplines,
            dispatcher=dispatcher,
        )

    async def _build_payload(self, record: Discipline) -> DisciplinePayload:
        return DisciplinePayload(
            owner_id=record.owner_id,
            name=record.name,
            teacher=record.teacher,
            room=record.room,
            color=record.color,
        )

    async def _materialize(
        self, owner_id: int, records: Sequence[Discipline]
    ) -> list[DisciplineView]:
        return [DisciplineView.model_validate(record) for record in records]

    def _values_from_remote(
        self, remote: RemoteDiscipline, context: Mapping[int, int]
    ) -> dict[str, Any]:
        return {
            "name": remote.name,
            "teacher": remote.teacher,
            "room": remote.room,
            "color": remote.color,
        }

    def _match_unlinked(
        self, unlinked: Sequence[Discipline], remote: RemoteDiscipline
    ) -> Discipline | None:
        for record in unlinked:
            if record.name == remote.name:
                return record
        return None


__all__ = ["DisciplineRepository"]
