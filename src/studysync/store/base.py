"""Generic local table store with one short-lived session per operation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlmodel import col, select

from ..db.session import SessionFactory
from ..models import SyncedRecord

logger = logging.getLogger(__name__)

RecordType = TypeVar("RecordType", bound=SyncedRecord)


@dataclass(slots=True)
class StagedChanges:
    """Inserts and updates collected before being applied in one commit.

    Updates map a local id to the values to overwrite on that row.
    """

    inserts: list[dict[str, Any]] = field(default_factory=list)
    updates: dict[int, dict[str, Any]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.inserts or self.updates)


class LocalStore(Generic[RecordType]):
    """Persistence helpers shared by the three entity tables.

    No session outlives a single call, so concurrent callers never share an
    open handle. Reads return detached instances.
    """

    def __init__(self, session_factory: SessionFactory, model_type: type[RecordType]) -> None:
        self._session_factory = session_factory
        self._model_type = model_type

    @property
    def model_type(self) -> type[RecordType]:
        return self._model_type

    def _domain_values(self, values: Mapping[str, Any]) -> dict[str, Any]:
        names = self._model_type.__domain_fields__
        return {name: values[name] for name in names if name in values}

    async def insert(
        self,
        owner_id: int,
        values: Mapping[str, Any],
        *,
        remote_id: int | None = None,
        synced: bool = False,
    ) -> int:
        """Insert a new row and return its local id."""
        _check_sync_flag(remote_id, synced)
        record = self._model_type(
            owner_id=owner_id,
            remote_id=remote_id,
            synced=synced,
            **self._domain_values(values),
        )
        async with self._session_factory() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
        if record.id is None:  # type: ignore[attr-defined]
            raise RuntimeError(f"{self._model_type.__name__} was not assigned a local id.")
        return record.id  # type: ignore[attr-defined]

    async def update(
        self,
        local_id: int,
        values: Mapping[str, Any],
        *,
        remote_id: int | None = None,
        synced: bool = False,
    ) -> None:
        """Replace the mutable fields of a row; missing rows are ignored.

        A remote id already stored on the row is kept when ``remote_id`` is
        ``None``: once linked, a record stays linked.
        """
        async with self._session_factory() as session:
            record = await session.get(self._model_type, local_id)
            if record is None:
                return
            effective_remote_id = remote_id if remote_id is not None else record.remote_id
            _check_sync_flag(effective_remote_id, synced)
            for name, value in self._domain_values(values).items():
                setattr(record, name, value)
            record.remote_id = effective_remote_id
            record.synced = synced
            session.add(record)
            await session.commit()

    async def delete(self, local_id: int) -> None:
        """Remove a row. Deleting an absent id is not an error."""
        async with self._session_factory() as session:
            record = await session.get(self._model_type, local_id)
            if record is None:
                return
            await session.delete(record)
            await session.commit()

    async def get(self, local_id: int) -> RecordType | None:
        async with self._session_factory() as session:
            return await session.get(self._model_type, local_id)

    async def get_by_remote_id(self, owner_id: int, remote_id: int) -> RecordType | None:
        async with self._session_factory() as session:
            result = await session.exec(
                select(self._model_type).where(
                    self._model_type.owner_id == owner_id,
                    self._model_type.remote_id == remote_id,
                )
            )
            return result.first()

    async def list_by_owner(self, owner_id: int) -> list[RecordType]:
        async with self._session_factory() as session:
            result = await session.exec(
                select(self._model_type).where(self._model_type.owner_id == owner_id)
            )
            return list(result.all())

    async def map_by_owner(self, owner_id: int) -> dict[int, RecordType]:
        """Return the owner's rows keyed by local id."""
        return {record.id: record for record in await self.list_by_owner(owner_id)}  # type: ignore[attr-defined]

    async def list_unsynced(self, owner_id: int) -> list[RecordType]:
        async with self._session_factory() as session:
            result = await session.exec(
                select(self._model_type)
                .where(
                    self._model_type.owner_id == owner_id,
                    col(self._model_type.synced) == False,  # noqa: E712
                )
                .order_by(col(self._model_type.id))  # type: ignore[attr-defined]
            )
            return list(result.all())

    async def mark_synced(
        self,
        local_id: int,
        remote_id: int,
        pushed_values: Mapping[str, Any],
    ) -> bool:
        """Record a successful push of ``pushed_values``.

        ``remote_id`` is the server record the push wrote to. It is attached
        when the row has none. The row only becomes ``synced`` if it is linked
        to that same remote record and its fields still equal what was pushed;
        otherwise it stays unsynced. Returns ``False`` when the row no longer
        exists.
        """
        async with self._session_factory() as session:
            record = await session.get(self._model_type, local_id)
            if record is None:
                return False
            if record.remote_id is None:
                record.remote_id = remote_id
            if record.remote_id != remote_id:
                logger.warning(
                    "%s %s is linked to remote %s; push to remote %s left unconfirmed",
                    self._model_type.__name__,
                    local_id,
                    record.remote_id,
                    remote_id,
                )
                record.synced = False
            else:
                record.synced = record.domain_values() == dict(pushed_values)
            session.add(record)
            await session.commit()
            return True

    async def apply(self, owner_id: int, changes: StagedChanges) -> None:
        """Apply a batch of reconciliation decisions atomically.

        Every staged row is written as ``synced``; either all of them land or
        none do.
        """
        if not changes:
            return
        async with self._session_factory() as session:
            for values in changes.inserts:
                session.add(
                    self._model_type(
                        owner_id=owner_id,
                        remote_id=values["remote_id"],
                        synced=True,
                        **self._domain_values(values),
                    )
                )
            for local_id, values in changes.updates.items():
                record = await session.get(self._model_type, local_id)
                if record is None:
                    continue
                for name, value in self._domain_values(values).items():
                    setattr(record, name, value)
                record.remote_id = values["remote_id"]
                record.synced = True
                session.add(record)
            await session.commit()


def _check_sync_flag(remote_id: int | None, synced: bool) -> None:
    if synced and remote_id is None:
        raise ValueError("A record cannot be marked synced without a remote id.")


__all__ = ["LocalStore", "RecordType", "StagedChanges"]
