"""Discipline table model."""

from __future__ import annotations

from sqlmodel import Field

from .common import SyncedRecord


class Discipline(SyncedRecord, table=True):
    """A class the student attends, as stored on the device."""

    __tablename__ = "disciplines"
    __table_args__ = {"sqlite_autoincrement": True}
    __domain_fields__ = ("name", "teacher", "room", "color")

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(nullable=False)
    teacher: str = Field(default="", nullable=False)
    room: str = Field(default="", nullable=False)
    color: str = Field(nullable=False)


__all__ = ["Discipline"]
