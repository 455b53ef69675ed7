"""Local record store."""

from __future__ import annotations

from .base import LocalStore, StagedChanges
from .entities import DisciplineStore, ScheduleStore, TaskStore
from .session import SessionStore

__all__ = [
    "DisciplineStore",
    "LocalStore",
    "ScheduleStore",
    "SessionStore",
    "StagedChanges",
    "TaskStore",
]
