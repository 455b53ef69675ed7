"""Local table models."""

from __future__ import annotations

from .common import SyncedRecord, SyncState
from .discipline import Discipline
from .schedule import Schedule
from .session import UserSession
from .task import Task

ENTITY_MODELS: tuple[type[SyncedRecord], ...] = (Discipline, Task, Schedule)

__all__ = [
    "ENTITY_MODELS",
    "Discipline",
    "Schedule",
    "SyncState",
    "SyncedRecord",
    "Task",
    "UserSession",
]
