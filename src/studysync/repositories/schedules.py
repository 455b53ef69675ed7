"""Schedule repository."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..core.config import Settings
from ..core.dispatch import PushDispatcher
from ..core.timeparse import normalize_time_of_day
from ..db.session import SessionFactory
from ..errors import PreconditionError
from ..models import Schedule
from ..remote import RemoteClient, RemoteSchedule, SchedulePayload
from ..schemas import ScheduleFields, ScheduleView
from ..store import ScheduleStore
from .linked import DisciplineLinkedRepository


class ScheduleRepository(
    DisciplineLinkedRepository[
        Schedule, ScheduleFields, ScheduleView, SchedulePayload, RemoteSchedule
    ]
):
    """Weekly class slots.

    A schedule whose discipline is not on the server yet is still saved; it
    stays local-only until a later push finds the discipline synced.
    """

    entity_name = "schedule"

    def __init__(
        self,
        session_factory: SessionFactory,
        remote: RemoteClient,
        *,
        dispatcher: PushDispatcher | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(
            ScheduleStore(session_factory),
            remote.schedules,
            session_factory,
            dispatcher=dispatcher,
            settings=settings,
        )

    async def _check_create(self, owner_id: int, fields: ScheduleFields) -> None:
        if fields.discipline_id is None:
            return
        if await self._owned_discipline(owner_id, fields.discipline_id) is None:
            raise PreconditionError(
                "A schedule can only reference one of your own disciplines.",
                details={"discipline_id": fields.discipline_id, "owner_id": owner_id},
            )

    async def _build_payload(self, record: Schedule) -> SchedulePayload | None:
        discipline_remote_id = await self._remote_discipline_id(
            record.owner_id, record.discipline_id
        )
        if discipline_remote_id is None:
            return None
        return SchedulePayload(
            owner_id=record.owner_id,
            discipline_id=discipline_remote_id,
            start_time=record.start_time,
            end_time=record.end_time,
            day_of_week=record.day_of_week,
        )

    def _values_from_remote(
        self, remote: RemoteSchedule, context: Mapping[int, int]
    ) -> dict[str, Any]:
        return {
            "discipline_id": context.get(remote.discipline_id),
            "day_of_week": remote.day_of_week,
            "start_time": remote.start_time,
            "end_time": remote.end_time,
        }

    async def _materialize(
        self, owner_id: int, records: Sequence[Schedule]
    ) -> list[ScheduleView]:
        index = await self._discipline_index(owner_id)
        views = []
        for record in records:
            discipline = self._display(index, record.discipline_id)
            views.append(
                ScheduleView(
                    id=record.id,
                    remote_id=record.remote_id,
                    owner_id=record.owner_id,
                    day_of_week=record.day_of_week,
                    start_time=normalize_time_of_day(record.start_time),
                    end_time=normalize_time_of_day(record.end_time),
                    discipline_local_id=discipline.local_id,
                    discipline_id=discipline.remote_id,
                    discipline_name=discipline.name,
                    discipline_color=discipline.color,
                    synced=record.synced,
                    sync_state=record.sync_state,
                )
            )
        return views


__all__ = ["ScheduleRepository"]
