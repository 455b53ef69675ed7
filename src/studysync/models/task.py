"""Task table model."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from .common import SyncedRecord


class Task(SyncedRecord, table=True):
    """A homework item or deadline.

    ``discipline_id`` holds the discipline's *local* id so the reference
    resolves before the discipline reaches the server. ``None`` means the
    task is not attached to any discipline.
    """

    __tablename__ = "tasks"
    __table_args__ = {"sqlite_autoincrement": True}
    __domain_fields__ = ("title", "description", "completed", "due_date", "discipline_id")

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(nullable=False)
    description: str = Field(default="", nullable=False)
    completed: bool = Field(
        default=False,
        nullable=False,
        sa_column_kwargs={"server_default": sa.false()},
    )
    due_date: str = Field(default="", nullable=False)
    discipline_id: int | None = Field(default=None, nullable=True, index=True)


__all__ = ["Task"]
