"""Async client for the study planner REST API."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter

from ..core.config import Settings
from ..errors import RemoteUnavailableError
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

logger = logging.getLogger(__name__)

T = TypeVar("T")
PayloadT = TypeVar("PayloadT", bound=BaseModel)
RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass(slots=True)
class RemoteResult(Generic[T]):
    """Outcome of a call that reached the server.

    ``success`` mirrors a 2xx status. Transport failures never produce a
    result; they raise :class:`RemoteUnavailableError` instead.
    """

    success: bool
    status_code: int
    data: T | None = None
    message: str | None = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        for key in ("message", "error", "detail", "mensagem", "erro"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    text = response.text.strip()
    if text and len(text) <= 200:
        return text
    return response.reason_phrase or f"HTTP {response.status_code}"


def _to_result(
    response: httpx.Response,
    parse: Callable[[Any], T] | None = None,
) -> RemoteResult[T]:
    if not response.is_success:
        return RemoteResult(
            success=False,
            status_code=response.status_code,
            message=_error_message(response),
        )
    if parse is None:
        return RemoteResult(success=True, status_code=response.status_code)
    try:
        data = parse(response.json())
    except ValueError as exc:
        logger.warning(
            "Malformed response body from %s %s",
            response.request.method,
            response.request.url,
            exc_info=True,
        )
        return RemoteResult(
            success=False,
            status_code=response.status_code,
            message=f"Malformed response: {exc}",
        )
    return RemoteResult(success=True, status_code=response.status_code, data=data)


def _epoch_millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


class RemoteClient:
    """Thin wrapper around ``httpx.AsyncClient`` exposing one resource per entity."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=settings.api_timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self.users = UserResource(self)
        self.disciplines: EntityResource[DisciplinePayload, RemoteDiscipline] = EntityResource(
            self, "disciplinas", RemoteDiscipline
        )
        self.tasks = TaskResource(self, "tarefas", RemoteTask)
        self.schedules: EntityResource[SchedulePayload, RemoteSchedule] = EntityResource(
            self, "horarios", RemoteSchedule
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, translating transport failures into ``RemoteUnavailableError``."""

        query = {key: value for key, value in (params or {}).items() if value is not None}
        try:
            response = await self._http.request(method, path, json=json, params=query or None)
        except httpx.TransportError as exc:
            logger.warning("Remote API unreachable for %s %s: %s", method, path, exc)
            raise RemoteUnavailableError(
                f"Remote API unreachable: {exc}",
                details={"method": method, "path": path},
            ) from exc
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "RemoteClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class EntityResource(Generic[PayloadT, RecordT]):
    """CRUD endpoints of one entity collection."""

    def __init__(self, client: RemoteClient, path: str, record_type: type[RecordT]) -> None:
        self._client = client
        self._path = path
        self._record_type = record_type
        self._list_adapter: TypeAdapter[list[RecordT]] = TypeAdapter(list[record_type])  # type: ignore[valid-type]

    @property
    def path(self) -> str:
        return self._path

    async def create(self, payload: PayloadT) -> RemoteResult[RecordT]:
        response = await self._client.request(
            "POST",
            self._path,
            json=payload.model_dump(by_alias=True),
        )
        return _to_result(response, self._record_type.model_validate)

    async def list(self, owner_id: int, **filters: Any) -> RemoteResult[list[RecordT]]:
        params = {"usuario_id": owner_id, **filters}
        response = await self._client.request("GET", self._path, params=params)
        return _to_result(response, self._list_adapter.validate_python)

    async def update(self, remote_id: int, payload: PayloadT) -> RemoteResult[None]:
        response = await self._client.request(
            "PUT",
            f"{self._path}/{remote_id}",
            json=payload.model_dump(by_alias=True),
        )
        return _to_result(response)

    async def delete(self, remote_id: int) -> RemoteResult[None]:
        response = await self._client.request("DELETE", f"{self._path}/{remote_id}")
        return _to_result(response)


class TaskResource(EntityResource[TaskPayload, RemoteTask]):
    """Task endpoints; listing accepts the server-side filters."""

    async def list(  # type: ignore[override]
        self,
        owner_id: int,
        *,
        discipline_id: int | None = None,
        completed: bool | None = None,
        due_from: datetime | None = None,
        due_until: datetime | None = None,
    ) -> RemoteResult[list[RemoteTask]]:
        return await super().list(
            owner_id,
            disciplina_id=discipline_id,
            status=None if completed is None else str(completed).lower(),
            data_inicio=None if due_from is None else _epoch_millis(due_from),
            data_fim=None if due_until is None else _epoch_millis(due_until),
        )


class UserResource:
    """Account endpoints."""

    def __init__(self, client: RemoteClient) -> None:
        self._client = client

    async def create(self, credentials: UserCredentials) -> RemoteResult[None]:
        response = await self._client.request(
            "POST",
            "usuarios",
            json=credentials.model_dump(),
        )
        return _to_result(response)

    async def login(self, credentials: UserCredentials) -> RemoteResult[RemoteUser]:
        response = await self._client.request(
            "POST",
            "usuarios/login",
            json=credentials.model_dump(),
        )
        return _to_result(response, RemoteUser.model_validate)


__all__ = [
    "EntityResource",
    "RemoteClient",
    "RemoteResult",
    "TaskResource",
    "UserResource",
]
