"""Request and response bodies of the remote REST API.

The server speaks Portuguese field names; the models expose English
attribute names and serialise with ``by_alias=True``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

_WIRE_CONFIG = ConfigDict(populate_by_name=True, extra="ignore")


class UserCredentials(BaseModel):
    model_config = _WIRE_CONFIG

    email: str
    password: str


class RemoteUser(BaseModel):
    model_config = _WIRE_CONFIG

    id: int
    email: str | None = None


class DisciplinePayload(BaseModel):
    model_config = _WIRE_CONFIG

    owner_id: int = Field(alias="usuario_id")
    name: str = Field(alias="nome")
    teacher: str = Field(default="", alias="professor")
    room: str = Field(default="", alias="sala")
    color: str = Field(alias="cores")

    @field_validator("teacher", "room", mode="before")
    @classmethod
    def _blank_missing_text(cls, value: object) -> object:
        return "" if value is None else value


class RemoteDiscipline(DisciplinePayload):
    id: int


class TaskPayload(BaseModel):
    """Task body. ``discipline_id`` is the discipline's *remote* id."""

    model_config = _WIRE_CONFIG

    owner_id: int = Field(alias="usuario_id")
    title: str = Field(alias="titulo")
    description: str = Field(default="", alias="descricao")
    completed: bool = Field(default=False, alias="status")
    discipline_id: int = Field(alias="disciplina_id")
    due_date: str = Field(default="", alias="data_validade")

    @field_validator("description", "due_date", mode="before")
    @classmethod
    def _blank_missing_text(cls, value: object) -> object:
        return "" if value is None else value


class RemoteTask(TaskPayload):
    id: int


class SchedulePayload(BaseModel):
    """Schedule body. ``discipline_id`` is the discipline's *remote* id."""

    model_config = _WIRE_CONFIG

    owner_id: int = Field(alias="usuario_id")
    discipline_id: int = Field(alias="disciplina_id")
    start_time: str = Field(alias="hora_comeco")
    end_time: str = Field(alias="hora_fim")
    day_of_week: int = Field(alias="dia_semana")


class RemoteSchedule(SchedulePayload):
    id: int


__all__ = [
    "DisciplinePayload",
    "RemoteDiscipline",
    "RemoteSchedule",
    "RemoteTask",
    "RemoteUser",
    "SchedulePayload",
    "TaskPayload",
    "UserCredentials",
]
