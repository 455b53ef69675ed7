"""Pydantic schemas exchanged with repository callers."""

from __future__ import annotations

from .discipline import DisciplineFields, DisciplineView
from .schedule import ScheduleFields, ScheduleView
from .sync import PushOutcome, SyncReport
from .task import TaskFields, TaskView

__all__ = [
    "DisciplineFields",
    "DisciplineView",
    "PushOutcome",
    "ScheduleFields",
    "ScheduleView",
    "SyncReport",
    "TaskFields",
    "TaskView",
]
