"""Discipline field payloads and read models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..models import SyncState


class DisciplineFields(BaseModel):
    """User-editable discipline fields."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Calculus I",
                "teacher": "Dr. Souza",
                "room": "B-204",
                "color": "#FF5722",
            }
        }
    )

    name: str = Field(min_length=1)
    teacher: str = ""
    room: str = ""
    color: str = Field(min_length=1)


class DisciplineView(BaseModel):
    """Discipline as presented to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    remote_id: int | None = None
    owner_id: int
    name: str
    teacher: str
    room: str
    color: str
    synced: bool
    sync_state: SyncState


__all__ = ["DisciplineFields", "DisciplineView"]
