"""Concrete stores for the three entity tables."""

from __future__ import annotations

from ..db.session import SessionFactory
from ..models import Discipline, Schedule, Task
from .base import LocalStore


class DisciplineStore(LocalStore[Discipline]):
    def __init__(self, session_factory: SessionFactory) -> None:
        super().__init__(session_factory, Discipline)


class TaskStore(LocalStore[Task]):
    def __init__(self, session_factory: SessionFactory) -> None:
        super().__init__(session_factory, Task)


class ScheduleStore(LocalStore[Schedule]):
    def __init__(self, session_factory: SessionFactory) -> None:
        super().__init__(session_factory, Schedule)


__all__ = ["DisciplineStore", "ScheduleStore", "TaskStore"]
