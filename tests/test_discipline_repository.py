from __future__ import annotations

import pytest

from studysync.core.dispatch import WaitPolicy
from studysync.errors import PreconditionError
from studysync.main import StudySyncApp
from studysync.models import SyncState
from studysync.schemas import DisciplineFields

from .conftest import OWNER_ID, FakePlannerApi, discipline_body

pytestmark = pytest.mark.asyncio


def calculus(**overrides: str) -> DisciplineFields:
    values = {"name": "Calculus", "teacher": "Dr. Souza", "room": "B-204", "color": "#FF5722"}
    values.update(overrides)
    return DisciplineFields(**values)


async def test_create_pushes_and_marks_synced(app: StudySyncApp, fake_api: FakePlannerApi) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())

    view = await app.disciplines.get(local_id)
    assert view is not None
    assert view.synced is True
    assert view.sync_state is SyncState.SYNCED
    assert view.remote_id in fake_api.records["disciplinas"]
    assert fake_api.records["disciplinas"][view.remote_id]["nome"] == "Calculus"
    assert fake_api.records["disciplinas"][view.remote_id]["professor"] == "Dr. Souza"


async def test_detached_create_is_visible_before_the_server_answers(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.hold()

    local_id = await app.disciplines.create(OWNER_ID, calculus(), wait=WaitPolicy.DETACH)

    pending = await app.disciplines.get(local_id)
    assert pending is not None
    assert pending.remote_id is None
    assert pending.synced is False
    assert pending.sync_state is SyncState.UNSYNCED
    assert [view.id for view in await app.disciplines.list_by_owner(OWNER_ID)] == [local_id]
    assert app.dispatcher.pending == 1

    fake_api.release()
    await app.disciplines.drain()

    finished = await app.disciplines.get(local_id)
    assert finished is not None
    assert finished.synced is True
    assert finished.remote_id is not None
    assert app.dispatcher.pending == 0


async def test_failed_push_leaves_record_unsynced_without_retry(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True
    first = await app.disciplines.create(OWNER_ID, calculus())

    view = await app.disciplines.get(first)
    assert view is not None
    assert view.remote_id is None
    assert view.synced is False

    fake_api.offline = False
    await app.disciplines.create(OWNER_ID, calculus(name="Algebra"))

    posted = [body["nome"] for body in fake_api.calls("POST", "disciplinas") if body]
    assert posted == ["Calculus", "Algebra"]
    still_pending = await app.disciplines.get(first)
    assert still_pending is not None
    assert still_pending.sync_state is SyncState.UNSYNCED


async def test_rejected_push_leaves_record_unsynced(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.fail("POST", "disciplinas", 500)

    local_id = await app.disciplines.create(OWNER_ID, calculus())

    view = await app.disciplines.get(local_id)
    assert view is not None
    assert view.remote_id is None
    assert view.synced is False
    assert fake_api.records["disciplinas"] == {}


async def test_update_round_trip_keeps_remote_id(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    created = await app.disciplines.get(local_id)
    assert created is not None

    await app.disciplines.update(local_id, OWNER_ID, calculus(room="C-310"))

    updated = await app.disciplines.get(local_id)
    assert updated is not None
    assert updated.room == "C-310"
    assert updated.remote_id == created.remote_id
    assert updated.synced is True
    assert fake_api.records["disciplinas"][created.remote_id]["sala"] == "C-310"
    assert len(fake_api.calls("PUT", "disciplinas")) == 1


async def test_update_of_never_pushed_record_creates_it_remotely(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    fake_api.offline = False

    await app.disciplines.update(local_id, OWNER_ID, calculus(name="Calculus II"))

    view = await app.disciplines.get(local_id)
    assert view is not None
    assert view.synced is True
    assert fake_api.records["disciplinas"][view.remote_id]["nome"] == "Calculus II"
    assert fake_api.calls("PUT", "disciplinas") == []


async def test_offline_update_keeps_remote_id_pending(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    fake_api.offline = True

    await app.disciplines.update(local_id, OWNER_ID, calculus(teacher="Dr. Reis"))

    view = await app.disciplines.get(local_id)
    assert view is not None
    assert view.remote_id is not None
    assert view.sync_state is SyncState.PENDING_PUSH


async def test_update_of_another_users_record_is_refused(app: StudySyncApp) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())

    with pytest.raises(PreconditionError):
        await app.disciplines.update(local_id, OWNER_ID + 1, calculus(name="Hijacked"))

    view = await app.disciplines.get(local_id)
    assert view is not None
    assert view.name == "Calculus"


async def test_delete_is_local_even_when_remote_delete_fails(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    fake_api.offline = True

    await app.disciplines.delete(local_id)

    assert await app.disciplines.get(local_id) is None
    assert len(fake_api.calls("DELETE", "disciplinas")) == 1
    assert len(fake_api.records["disciplinas"]) == 1


async def test_delete_removes_remote_record(app: StudySyncApp, fake_api: FakePlannerApi) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())

    await app.disciplines.delete(local_id)

    assert await app.disciplines.get(local_id) is None
    assert fake_api.records["disciplinas"] == {}


async def test_delete_of_local_only_record_skips_the_server(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    fake_api.offline = False

    await app.disciplines.delete(local_id)

    assert fake_api.calls("DELETE", "disciplinas") == []


async def test_pull_links_unsynced_discipline_with_same_name(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    fake_api.offline = False
    fake_api.seed("disciplinas", discipline_body("Calculus"), record_id=7)

    report = await app.disciplines.sync_from_remote(OWNER_ID)

    assert report.completed is True
    assert report.linked == 1
    assert report.inserted == 0
    disciplines = await app.disciplines.list_by_owner(OWNER_ID)
    assert len(disciplines) == 1
    assert disciplines[0].id == local_id
    assert disciplines[0].remote_id == 7
    assert disciplines[0].synced is True


async def test_pull_inserts_remote_discipline_without_match(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True
    await app.disciplines.create(OWNER_ID, calculus(name="Biology"))
    fake_api.offline = False
    fake_api.seed("disciplinas", discipline_body("Calculus"), record_id=7)
    fake_api.seed("disciplinas", discipline_body("Calculus", owner_id=OWNER_ID + 1), record_id=8)

    report = await app.disciplines.sync_from_remote(OWNER_ID)

    assert report.inserted == 1
    assert report.linked == 0
    by_name = {view.name: view for view in await app.disciplines.list_by_owner(OWNER_ID)}
    assert set(by_name) == {"Biology", "Calculus"}
    assert by_name["Calculus"].remote_id == 7
    assert by_name["Biology"].sync_state is SyncState.UNSYNCED


async def test_pull_overwrites_linked_record_with_server_state(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    local_id = await app.disciplines.create(OWNER_ID, calculus())
    view = await app.disciplines.get(local_id)
    assert view is not None
    fake_api.records["disciplinas"][view.remote_id]["sala"] = "Auditorium"

    report = await app.disciplines.sync_from_remote(OWNER_ID)

    assert report.updated == 1
    refreshed = await app.disciplines.get_by_remote_id(OWNER_ID, view.remote_id)
    assert refreshed is not None
    assert refreshed.id == local_id
    assert refreshed.room == "Auditorium"


async def test_pull_while_offline_reports_incomplete(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True

    report = await app.disciplines.sync_from_remote(OWNER_ID)

    assert report.completed is False
    assert report.error is not None
    assert await app.disciplines.list_by_owner(OWNER_ID) == []


async def test_sync_to_remote_flushes_offline_work(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.offline = True
    await app.disciplines.create(OWNER_ID, calculus())
    await app.disciplines.create(OWNER_ID, calculus(name="Algebra"))
    fake_api.offline = False

    report = await app.disciplines.sync_to_remote(OWNER_ID)

    assert report.pushed == 2
    assert report.failed == 0
    assert all(view.synced for view in await app.disciplines.list_by_owner(OWNER_ID))
    assert sorted(item["nome"] for item in fake_api.records["disciplinas"].values()) == [
        "Algebra",
        "Calculus",
    ]


async def test_overlapping_detached_pushes_share_one_remote_record(
    app: StudySyncApp, fake_api: FakePlannerApi
) -> None:
    fake_api.hold()

    local_id = await app.disciplines.create(OWNER_ID, calculus(), wait=WaitPolicy.DETACH)
    await app.disciplines.update(
        local_id, OWNER_ID, calculus(name="Calculus II"), wait=WaitPolicy.DETACH
    )
    fake_api.release()
    await app.disciplines.drain()

    view = await app.disciplines.get(local_id)
    assert view is not None
    assert view.name == "Calculus II"
    assert view.sync_state is SyncState.SYNCED
    assert list(fake_api.records["disciplinas"]) == [view.remote_id]
    assert fake_api.records["disciplinas"][view.remote_id]["nome"] == "Calculus II"
    assert len(fake_api.calls("POST", "disciplinas")) == 1
