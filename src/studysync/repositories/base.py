"""Shared local-first synchronization logic for entity repositories."""

from __future__ import annotations

import asyncio
import logging
import weakref
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..core.context import sync_run
from ..core.dispatch import PushDispatcher, WaitPolicy
from ..errors import PreconditionError, RemoteUnavailableError
from ..remote.client import EntityResource, RemoteResult
from ..schemas.sync import PushOutcome, SyncReport
from ..store.base import LocalStore, RecordType, StagedChanges

logger = logging.getLogger(__name__)

FieldsT = TypeVar("FieldsT", bound=BaseModel)
ViewT = TypeVar("ViewT", bound=BaseModel)
PayloadT = TypeVar("PayloadT", bound=BaseModel)
RemoteT = TypeVar("RemoteT", bound=BaseModel)


class SyncRepository(ABC, Generic[RecordType, FieldsT, ViewT, PayloadT, RemoteT]):
    """Local store plus remote resource for one entity type.

    Every mutation writes locally first and only then talks to the server.
    Remote failures are logged and leave the record unsynced; they never
    reach the caller.
    """

    entity_name = "record"

    def __init__(
        self,
        store: LocalStore[RecordType],
        resource: EntityResource[PayloadT, RemoteT],
        *,
        dispatcher: PushDispatcher | None = None,
    ) -> None:
        self._store = store
        self._resource = resource
        self._dispatcher = dispatcher or PushDispatcher()
        self._push_locks: weakref.WeakValueDictionary[int, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def store(self) -> LocalStore[RecordType]:
        """Expose the underlying store for advanced scenarios."""
        return self._store

    @property
    def dispatcher(self) -> PushDispatcher:
        return self._dispatcher

    # -- hooks -------------------------------------------------------------

    async def _check_create(self, owner_id: int, fields: FieldsT) -> None:
        """Raise :class:`PreconditionError` if ``fields`` cannot be created."""

    @abstractmethod
    async def _build_payload(self, record: RecordType) -> PayloadT | None:
        """Return the request body, or ``None`` if the record cannot be pushed yet."""

    @abstractmethod
    async def _materialize(self, owner_id: int, records: Sequence[RecordType]) -> list[ViewT]:
        """Turn raw rows into caller-facing views."""

    @abstractmethod
    def _values_from_remote(self, remote: RemoteT, context: Mapping[int, int]) -> dict[str, Any]:
        """Map a remote record onto local domain values."""

    async def _pull_context(self, owner_id: int) -> Mapping[int, int]:
        """Lookup data needed by :meth:`_values_from_remote`."""
        return {}

    async def _list_remote(self, owner_id: int) -> RemoteResult[list[RemoteT]]:
        return await self._resource.list(owner_id)

    def _match_unlinked(self, unlinked: Sequence[RecordType], remote: RemoteT) -> RecordType | None:
        """Pick a local record without remote id that stands for ``remote``.

        No heuristic matching by default: unmatched remote records are
        inserted as new rows.
        """
        return None

    # -- mutations -----------------------------------------------------------

    async def create(
        self,
        owner_id: int,
        fields: FieldsT,
        *,
        wait: WaitPolicy = WaitPolicy.AWAIT,
    ) -> int:
        """Insert locally as unsynced and push; returns the local id."""
        await self._check_create(owner_id, fields)
        local_id = await self._store.insert(owner_id, fields.model_dump())
        logger.info("Created %s %s locally", self.entity_name, local_id)
        await self._dispatcher.submit(
            self._push(local_id),
            wait,
            name=f"push-{self.entity_name}-{local_id}",
        )
        return local_id

    async def update(
        self,
        local_id: int,
        owner_id: int,
        fields: FieldsT,
        *,
        wait: WaitPolicy = WaitPolicy.AWAIT,
    ) -> None:
        """Overwrite locally as unsynced and push (update, or create if never pushed)."""
        existing = await self._store.get(local_id)
        if existing is None:
            logger.info("Ignoring update of missing %s %s", self.entity_name, local_id)
            return
        if existing.owner_id != owner_id:
            raise PreconditionError(
                f"{self.entity_name.capitalize()} {local_id} belongs to another user.",
                details={"local_id": local_id, "owner_id": owner_id},
            )
        await self._store.update(
            local_id,
            fields.model_dump(),
            remote_id=existing.remote_id,
            synced=False,
        )
        await self._dispatcher.submit(
            self._push(local_id),
            wait,
            name=f"push-{self.entity_name}-{local_id}",
        )

    async def delete(self, local_id: int, *, wait: WaitPolicy = WaitPolicy.AWAIT) -> None:
        """Delete locally, then delete remotely on a best-effort basis.

        The local deletion is never rolled back.
        """
        existing = await self._store.get(local_id)
        await self._store.delete(local_id)
        if existing is None or existing.remote_id is None:
            return
        await self._dispatcher.submit(
            self._push_delete(local_id, existing.remote_id),
            wait,
            name=f"delete-{self.entity_name}-{local_id}",
        )

    async def drain(self) -> None:
        """Wait for every detached push issued through this repository's dispatcher."""
        await self._dispatcher.drain()

    # -- reads ---------------------------------------------------------------

    async def get(self, local_id: int) -> ViewT | None:
        record = await self._store.get(local_id)
        if record is None:
            return None
        views = await self._materialize(record.owner_id, [record])
        return views[0]

    async def get_by_remote_id(self, owner_id: int, remote_id: int) -> ViewT | None:
        """Find the local record a server id refers to."""
        record = await self._store.get_by_remote_id(owner_id, remote_id)
        if record is None:
            return None
        views = await self._materialize(owner_id, [record])
        return views[0]

    async def list_by_owner(self, owner_id: int) -> list[ViewT]:
        records = await self._store.list_by_owner(owner_id)
        return await self._materialize(owner_id, records)

    # -- synchronization -----------------------------------------------------

    async def sync_from_remote(self, owner_id: int) -> SyncReport:
        """Pull the owner's remote records and reconcile them into the store.

        Records are matched by remote id, then through
        :meth:`_match_unlinked`, and inserted otherwise. All decisions are
        applied in a single transaction. Local records missing remotely are
        left untouched.
        """
        report = SyncReport(entity=self.entity_name)
        with sync_run("pull"):
            try:
                result = await self._list_remote(owner_id)
            except RemoteUnavailableError as exc:
                logger.warning("Pull of %ss skipped: %s", self.entity_name, exc.message)
                report.completed = False
                report.error = exc.message
                return report
            if not result.success:
                logger.error(
                    "Pull of %ss failed with status %s: %s",
                    self.entity_name,
                    result.status_code,
                    result.message,
                )
                report.completed = False
                report.error = result.message
                return report

            local_records = await self._store.list_by_owner(owner_id)
            context = await self._pull_context(owner_id)
            by_remote_id = {
                record.remote_id: record for record in local_records if record.remote_id is not None
            }
            unlinked = [record for record in local_records if record.remote_id is None]
            seen: set[int] = set()
            changes = StagedChanges()

            for remote in result.data or []:
                remote_id: int = remote.id  # type: ignore[attr-defined]
                if remote_id in seen:
                    continue
                seen.add(remote_id)
                values = self._values_from_remote(remote, context)
                values["remote_id"] = remote_id

                existing = by_remote_id.get(remote_id)
                if existing is not None:
                    changes.updates[existing.id] = values  # type: ignore[attr-defined]
                    report.updated += 1
                    continue

                match = self._match_unlinked(unlinked, remote)
                if match is not None:
                    unlinked.remove(match)
                    changes.updates[match.id] = values  # type: ignore[attr-defined]
                    report.linked += 1
                    continue

                changes.inserts.append(values)
                report.inserted += 1

            await self._store.apply(owner_id, changes)
            logger.info(
                "Pulled %ss: %d updated, %d linked, %d inserted",
                self.entity_name,
                report.updated,
                report.linked,
                report.inserted,
            )
        return report

    async def sync_to_remote(self, owner_id: int) -> SyncReport:
        """Push every unsynced record of the owner, one at a time."""
        report = SyncReport(entity=self.entity_name)
        with sync_run("push"):
            for record in await self._store.list_unsynced(owner_id):
                outcome = await self._push(record.id)  # type: ignore[attr-defined]
                if outcome is PushOutcome.SYNCED:
                    report.pushed += 1
                elif outcome is PushOutcome.SKIPPED:
                    report.skipped += 1
                else:
                    report.failed += 1
            logger.info(
                "Pushed %ss: %d synced, %d failed, %d skipped",
                self.entity_name,
                report.pushed,
                report.failed,
                report.skipped,
            )
        return report

    async def _push(self, local_id: int) -> PushOutcome:
        """Push one record; pushes of the same record run one after another.

        Each push reads the row only once it holds the lock, so a push queued
        behind a create sees the remote id that create attached.
        """
        lock = self._push_locks.get(local_id)
        if lock is None:
            lock = self._push_locks[local_id] = asyncio.Lock()
        async with lock:
            return await self._push_current(local_id)

    async def _push_current(self, local_id: int) -> PushOutcome:
        record = await self._store.get(local_id)
        if record is None:
            return PushOutcome.SKIPPED
        payload = await self._build_payload(record)
        if payload is None:
            logger.info(
                "%s %s stays local until its discipline is synced",
                self.entity_name.capitalize(),
                local_id,
            )
            return PushOutcome.SKIPPED

        snapshot = record.domain_values()
        remote_id = record.remote_id
        try:
            if remote_id is None:
                created = await self._resource.create(payload)
                result: RemoteResult[Any] = created
                if created.success and created.data is not None:
                    remote_id = created.data.id  # type: ignore[attr-defined]
            else:
                result = await self._resource.update(remote_id, payload)
        except RemoteUnavailableError as exc:
            logger.warning(
                "Push of %s %s deferred: %s",
                self.entity_name,
                local_id,
                exc.message,
            )
            return PushOutcome.UNREACHABLE

        if not result.success or remote_id is None:
            logger.error(
                "Push of %s %s rejected with status %s: %s",
                self.entity_name,
                local_id,
                result.status_code,
                result.message,
            )
            return PushOutcome.REJECTED

        if not await self._store.mark_synced(local_id, remote_id, snapshot):
            logger.warning(
                "%s %s was deleted while its push was in flight; remote %s is orphaned",
                self.entity_name.capitalize(),
                local_id,
                remote_id,
            )
            return PushOutcome.SKIPPED
        logger.info("Synced %s %s as remote %s", self.entity_name, local_id, remote_id)
        return PushOutcome.SYNCED

    async def _push_delete(self, local_id: int, remote_id: int) -> PushOutcome:
        try:
            result = await self._resource.delete(remote_id)
        except RemoteUnavailableError as exc:
            logger.warning(
                "Remote delete of %s %s (remote %s) abandoned: %s",
                self.entity_name,
                local_id,
                remote_id,
                exc.message,
            )
            return PushOutcome.UNREACHABLE
        if not result.success:
            logger.error(
                "Remote delete of %s %s (remote %s) rejected with status %s: %s",
                self.entity_name,
                local_id,
                remote_id,
                result.status_code,
                result.message,
            )
            return PushOutcome.REJECTED
        logger.info("Deleted %s %s remotely (remote %s)", self.entity_name, local_id, remote_id)
        return PushOutcome.SYNCED


__all__ = ["FieldsT", "PayloadT", "RemoteT", "SyncRepository", "ViewT"]
