"""Result types reported by synchronization operations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class PushOutcome(str, Enum):
    """What happened to one attempted push."""

    SYNCED = "synced"
    REJECTED = "rejected"
    UNREACHABLE = "unreachable"
    SKIPPED = "skipped"


class SyncReport(BaseModel):
    """Counters describing one pull or push sweep."""

    entity: str
    completed: bool = True
    inserted: int = Field(default=0, ge=0)
    updated: int = Field(default=0, ge=0)
    linked: int = Field(default=0, ge=0)
    pushed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    error: str | None = None


__all__ = ["PushOutcome", "SyncReport"]
