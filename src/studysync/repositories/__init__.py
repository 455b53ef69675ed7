"""Local-first repositories pairing the local store with the remote API."""

from __future__ import annotations

from .base import SyncRepository
from .disciplines import DisciplineRepository
from .linked import DisciplineLinkedRepository
from .schedules import ScheduleRepository
from .tasks import TaskRepository

__all__ = [
    "DisciplineLinkedRepository",
    "DisciplineRepository",
    "ScheduleRepository",
    "SyncRepository",
    "TaskRepository",
]
