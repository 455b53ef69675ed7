"""Schedule table model."""

from __future__ import annotations

from sqlmodel import Field

from .common import SyncedRecord


class Schedule(SyncedRecord, table=True):
    """A weekly class slot. Times are stored exactly as entered or received."""

    __tablename__ = "schedules"
    __table_args__ = {"sqlite_autoincrement": True}
    __domain_fields__ = ("discipline_id", "day_of_week", "start_time", "end_time")

    id: int | None = Field(default=None, primary_key=True)
    discipline_id: int | None = Field(default=None, nullable=True, index=True)
    day_of_week: int = Field(nullable=False)
    start_time: str = Field(nullable=False)
    end_time: str = Field(nullable=False)


__all__ = ["Schedule"]
