"""Shared columns and sync-state helpers for locally stored records."""

from __future__ import annotations

from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class SyncState(str, Enum):
    """Where a local record stands relative to the server."""

    UNSYNCED = "unsynced"
    PENDING_PUSH = "pending_push"
    SYNCED = "synced"


class SyncedRecord(SQLModel, table=False):
    """Columns carried by every entity table.

    ``id`` is the local identifier assigned by the store; ``remote_id`` is
    the server identifier, absent until the first successful push or pull.
    """

    __domain_fields__ = ()

    remote_id: int | None = Field(default=None, nullable=True, index=True)
    owner_id: int = Field(nullable=False, index=True)
    synced: bool = Field(
        default=False,
        nullable=False,
        sa_column_kwargs={"server_default": sa.false()},
    )

    @property
    def sync_state(self) -> SyncState:
        if self.remote_id is None:
            return SyncState.UNSYNCED
        if not self.synced:
            return SyncState.PENDING_PUSH
        return SyncState.SYNCED

    def domain_values(self) -> dict[str, Any]:
        """Return the user-editable fields of the record."""

        return {name: getattr(self, name) for name in self.__domain_fields__}


__all__ = ["SyncState", "SyncedRecord"]
