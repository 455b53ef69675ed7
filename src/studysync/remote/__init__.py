"""HTTP access to the remote study planner API."""

from .client import EntityResource, RemoteClient, RemoteResult, TaskResource, UserResource
from .schemas import (
    DisciplinePayload,
    RemoteDiscipline,
    RemoteSchedule,
    RemoteTask,
    RemoteUser,
    SchedulePayload,
    TaskPayload,
    UserCredentials,
)

__all__ = [
    "DisciplinePayload",
    "EntityResource",
    "RemoteClient",
    "RemoteDiscipline",
    "RemoteResult",
    "RemoteSchedule",
    "RemoteTask",
    "RemoteUser",
    "SchedulePayload",
    "TaskPayload",
    "TaskResource",
    "UserCredentials",
    "UserResource",
]
