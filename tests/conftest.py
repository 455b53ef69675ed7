from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from itertools import count
from pathlib import Path
from typing import Any

import httpx
import pytest

from studysync.core.config import Settings
from studysync.main import StudySyncApp, create_app
from studysync.schemas import DisciplineFields

OWNER_ID = 42
API_BASE_URL = "http://planner.test/api/"
COLLECTIONS = ("disciplinas", "tarefas", "horarios")


class FakePlannerApi:
    """In-memory stand-in for the planner REST API, served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.records: dict[str, dict[int, dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        self.users: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, str, dict[str, Any] | None]] = []
        self.offline = False
        self.forced_status: dict[tuple[str, str], int] = {}
        self._gate: asyncio.Event | None = None
        self._ids = count(100)

    # -- test controls ---------------------------------------------------------

    def seed(self, collection: str, body: dict[str, Any], *, record_id: int | None = None) -> int:
        new_id = record_id if record_id is not None else next(self._ids)
        self.records[collection][new_id] = {**body, "id": new_id}
        return new_id

    def add_user(self, email: str, password: str, *, user_id: int = OWNER_ID) -> None:
        self.users[email] = {"id": user_id, "email": email, "password": password}

    def fail(self, method: str, collection: str, status_code: int) -> None:
        self.forced_status[(method, collection)] = status_code

    def hold(self) -> None:
        """Block every request until :meth:`release` is called."""
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()

    def calls(self, method: str, collection: str) -> list[dict[str, Any] | None]:
        return [
            body
            for call_method, path, body in self.requests
            if call_method == method and path.split("/")[0] == collection
        ]

    # -- transport -------------------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/").strip("/")
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        if self._gate is not None:
            await self._gate.wait()
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        parts = path.split("/")
        forced = self.forced_status.get((request.method, parts[0]))
        if forced is not None:
            return httpx.Response(forced, json={"message": "forced failure"})

        if parts[0] == "usuarios":
            return self._users(parts, body or {})
        if parts[0] not in self.records:
            return httpx.Response(404, json={"message": "unknown route"})
        collection = self.records[parts[0]]

        if len(parts) == 1 and request.method == "GET":
            owner = int(request.url.params["usuario_id"])
            items = [item for item in collection.values() if item["usuario_id"] == owner]
            discipline = request.url.params.get("disciplina_id")
            if discipline is not None:
                items = [item for item in items if item["disciplina_id"] == int(discipline)]
            return httpx.Response(200, json=items)
        if len(parts) == 1 and request.method == "POST":
            new_id = self.seed(parts[0], body or {})
            return httpx.Response(201, json=collection[new_id])

        record_id = int(parts[1])
        if record_id not in collection:
            return httpx.Response(404, json={"message": "not found"})
        if request.method == "PUT":
            collection[record_id] = {**(body or {}), "id": record_id}
            return httpx.Response(200, json={"message": "updated"})
        if request.method == "DELETE":
            del collection[record_id]
            return httpx.Response(204)
        return httpx.Response(405)

    def _users(self, parts: list[str], body: dict[str, Any]) -> httpx.Response:
        email = body.get("email", "")
        if parts[-1] == "login":
            user = self.users.get(email)
            if user is None:
                return httpx.Response(404, json={"message": "user not found"})
            if user["password"] != body.get("password"):
                return httpx.Response(401, json={"message": "bad credentials"})
            return httpx.Response(200, json={"id": user["id"], "email": email})
        if email in self.users:
            return httpx.Response(400, json={"message": "email taken"})
        self.add_user(email, body.get("password", ""), user_id=next(self._ids))
        return httpx.Response(201, json={"message": "created"})


def discipline_body(name: str, *, owner_id: int = OWNER_ID, color: str = "#FF5722") -> dict[str, Any]:
    return {"usuario_id": owner_id, "nome": name, "professor": "", "sala": "", "cores": color}


@pytest.fixture()
def fake_api() -> FakePlannerApi:
    return FakePlannerApi()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'studysync.db'}",
        api_base_url=API_BASE_URL,
    )


@pytest.fixture()
async def app(settings: Settings, fake_api: FakePlannerApi) -> AsyncIterator[StudySyncApp]:
    application = create_app(settings, transport=httpx.MockTransport(fake_api.handler))
    await application.start(setup_logging=False)
    try:
        yield application
    finally:
        fake_api.release()
        await application.aclose()


@pytest.fixture()
async def synced_discipline(app: StudySyncApp) -> int:
    """Local id of a discipline that already exists on the server."""
    return await app.disciplines.create(
        OWNER_ID,
        DisciplineFields(name="Physics", teacher="Dr. Lima", room="A-101", color="#03A9F4"),
    )
