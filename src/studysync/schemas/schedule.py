"""Schedule field payloads and read models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..models import SyncState


class ScheduleFields(BaseModel):
    """User-editable schedule fields. ``discipline_id`` is a local id."""

    discipline_id: int | None = None
    day_of_week: int = Field(ge=0, le=6, description="0 is Sunday")
    start_time: str = Field(min_length=1)
    end_time: str = Field(min_length=1)


class ScheduleView(BaseModel):
    """Schedule slot with normalised ``HH:MM`` times and discipline display fields."""

    id: int
    remote_id: int | None = None
    owner_id: int
    day_of_week: int
    start_time: str
    end_time: str
    discipline_local_id: int | None = None
    discipline_id: int = 0
    discipline_name: str
    discipline_color: str
    synced: bool
    sync_state: SyncState


__all__ = ["ScheduleFields", "ScheduleView"]
