"""Task field payloads and read models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models import SyncState


class TaskFields(BaseModel):
    """User-editable task fields. ``discipline_id`` is a local id."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Problem set 3",
                "description": "Exercises 1-12",
                "completed": False,
                "due_date": "2024-05-10T23:59:00",
                "discipline_id": 1,
            }
        }
    )

    title: str = Field(min_length=1)
    description: str = ""
    completed: bool = False
    due_date: str = ""
    discipline_id: int | None = None


class TaskView(BaseModel):
    """Task joined with the display fields of its discipline.

    ``discipline_id`` here is the discipline's *remote* id, 0 when the
    discipline is unknown or not yet on the server.
    """

    id: int
    remote_id: int | None = None
    owner_id: int
    title: str
    description: str
    completed: bool
    due_date: str
    due_at: datetime | None = None
    discipline_local_id: int | None = None
    discipline_id: int = 0
    discipline_name: str
    discipline_color: str
    synced: bool
    sync_state: SyncState


__all__ = ["TaskFields", "TaskView"]
