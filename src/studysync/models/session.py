"""Single-row table holding the logged-in user."""

from __future__ import annotations

from sqlmodel import Field, SQLModel


class UserSession(SQLModel, table=True):
    __tablename__ = "session"

    user_id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})


__all__ = ["UserSession"]
