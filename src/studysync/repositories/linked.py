"""Base for entities that hang off a discipline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from ..core.config import Settings, get_settings
from ..core.dispatch import PushDispatcher
from ..db.session import SessionFactory
from ..models import Discipline
from ..remote.client import EntityResource
from ..store import DisciplineStore, LocalStore
from ..store.base import RecordType
from .base import FieldsT, PayloadT, RemoteT, SyncRepository, ViewT


@dataclass(frozen=True, slots=True)
class DisciplineDisplay:
    """Discipline fields copied onto a task or schedule view."""

    local_id: int | None
    remote_id: int
    name: str
    color: str


class DisciplineLinkedRepository(
    SyncRepository[RecordType, FieldsT, ViewT, PayloadT, RemoteT]
):
    """Resolves the local/remote discipline reference in both directions.

    Locally the reference is a discipline *local* id; on the wire it is the
    discipline's *remote* id.
    """

    def __init__(
        self,
        store: LocalStore[RecordType],
        resource: EntityResource[PayloadT, RemoteT],
        session_factory: SessionFactory,
        *,
        dispatcher: PushDispatcher | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(store, resource, dispatcher=dispatcher)
        self._disciplines = DisciplineStore(session_factory)
        self._settings = settings or get_settings()

    async def _owned_discipline(
        self, owner_id: int, discipline_id: int | None
    ) -> Discipline | None:
        """The referenced discipline if it exists and belongs to ``owner_id``."""
        if discipline_id is None:
            return None
        discipline = await self._disciplines.get(discipline_id)
        if discipline is None or discipline.owner_id != owner_id:
            return None
        return discipline

    async def _remote_discipline_id(
        self, owner_id: int, discipline_id: int | None
    ) -> int | None:
        """Remote id of an owned local discipline, or ``None`` if it is not on the server."""
        discipline = await self._owned_discipline(owner_id, discipline_id)
        if discipline is None:
            return None
        return discipline.remote_id

    async def _pull_context(self, owner_id: int) -> Mapping[int, int]:
        disciplines = await self._disciplines.list_by_owner(owner_id)
        return {
            discipline.remote_id: discipline.id  # type: ignore[misc]
            for discipline in disciplines
            if discipline.remote_id is not None
        }

    async def _discipline_index(self, owner_id: int) -> dict[int, Discipline]:
        return await self._disciplines.map_by_owner(owner_id)

    def _display(
        self, index: Mapping[int, Discipline], discipline_id: int | None
    ) -> DisciplineDisplay:
        discipline = index.get(discipline_id) if discipline_id is not None else None
        if discipline is None:
            return DisciplineDisplay(
                local_id=discipline_id,
                remote_id=0,
                name=self._settings.default_discipline_name,
                color=self._settings.default_discipline_color,
            )
        return DisciplineDisplay(
            local_id=discipline_id,
            remote_id=discipline.remote_id or 0,
            name=discipline.name,
            color=discipline.color,
        )


__all__ = ["DisciplineDisplay", "DisciplineLinkedRepository"]
