from __future__ import annotations

import json
import threading
import time
from datetime import date

import pytest

from src.timesheet_pro.timesheet_pro.core.enums import Collection, Role, Status
from src.timesheet_pro.timesheet_pro.core.exceptions import NotFoundError, ValidationError
from src.timesheet_pro.timesheet_pro.store.entity_store import EntityStore
from src.timesheet_pro.timesheet_pro.store.json_file_backend import JsonFileBackend
from src.timesheet_pro.timesheet_pro.store.memory_backend import MemoryBackend
from src.timesheet_pro.timesheet_pro.timesheets.model import ProjectWork, Timesheet, WorkEntry
from src.timesheet_pro.timesheet_pro.users.model import User


def _user(user_id: int) -> User:
    return User(user_id=user_id, name=f"U{user_id}", email=f"u{user_id}@x.test", password_hash="h", role=Role.EMPLOYEE, company="Acme")


def test_unit_of_work_commits_all_collections_in_one_save():
    backend = MemoryBackend()
    store = EntityStore(backend)

    with store.unit_of_work() as uow:
        uow.replace(Collection.USERS, [_user(1)])
        uow.replace(Collection.BEST_EMPLOYEE_IDS, [1])

    assert backend.save_calls == 1
    assert [u.user_id for u in store.get(Collection.USERS)] == [1]
    assert backend.load()["bestEmployeeIds"] == [1]


def test_failed_unit_of_work_writes_nothing():
    backend = MemoryBackend()
    store = EntityStore(backend)

    with pytest.raises(NotFoundError):
        with store.unit_of_work() as uow:
            uow.replace(Collection.USERS, [_user(1)])
            uow.require(Collection.PROJECTS, 99, "Project")

    assert backend.save_calls == 0
    assert store.get(Collection.USERS) == ()


def test_reads_inside_unit_of_work_see_staged_values():
    store = EntityStore(MemoryBackend())
    with store.unit_of_work() as uow:
        uow.replace(Collection.USERS, [_user(1)])
        assert uow.find(Collection.USERS, 1) is not None
        assert store.get(Collection.USERS) == ()


def test_next_id_does_not_repeat_within_a_unit_of_work():
    store = EntityStore(MemoryBackend())
    store.replace(Collection.USERS, [_user(3)])
    with store.unit_of_work() as uow:
        assert uow.next_id(Collection.USERS) == 4
        assert uow.next_id(Collection.USERS) == 5


def test_duplicate_ids_are_rejected():
    store = EntityStore(MemoryBackend())
    with pytest.raises(ValidationError):
        store.replace(Collection.USERS, [_user(1), _user(1)])


def test_json_file_backend_persists_across_stores(tmp_path):
    path = tmp_path / "data" / "store.json"
    store = EntityStore(JsonFileBackend(path))
    ts = Timesheet(
        timesheet_id=1,
        user_id=1,
        date=date(2024, 3, 1),
        in_time="09:00",
        out_time="17:00",
        project_work=(ProjectWork(project_id=7, work_entries=(WorkEntry("Build", 2.5),)),),
        status=Status.APPROVED,
        approver_id=2,
    )
    store.replace(Collection.TIMESHEETS, [ts])

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["timesheets"][0]["projectWork"][0]["workEntries"][0]["hours"] == 2.5

    reloaded = EntityStore(JsonFileBackend(path))
    assert reloaded.get(Collection.TIMESHEETS) == (ts,)


def test_json_file_backend_writes_seed_on_first_load(tmp_path):
    path = tmp_path / "store.json"
    seed = {"bestEmployeeIds": [3]}
    store = EntityStore(JsonFileBackend(path, seed=seed))

    assert store.get(Collection.BEST_EMPLOYEE_IDS) == (3,)
    assert json.loads(path.read_text(encoding="utf-8")) == seed


def test_concurrent_units_of_work_do_not_lose_updates():
    backend = MemoryBackend()
    store = EntityStore(backend)
    workers = 8
    start = threading.Barrier(workers)

    def add_user():
        start.wait()
        with store.unit_of_work() as uow:
            current = uow.get(Collection.USERS)
            new_id = uow.next_id(Collection.USERS)
            time.sleep(0.002)
            uow.replace(Collection.USERS, current + (_user(new_id),))

    threads = [threading.Thread(target=add_user) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(u.user_id for u in store.get(Collection.USERS)) == list(range(1, workers + 1))
    assert backend.save_calls == workers
    assert len(backend.load()["users"]) == workers


def test_after_commit_callbacks_run_only_on_success():
    store = EntityStore(MemoryBackend())
    ran = []

    with store.unit_of_work() as uow:
        uow.replace(Collection.USERS, [_user(1)])
        uow.after_commit(lambda: ran.append("committed"))
        assert ran == []
    assert ran == ["committed"]

    with pytest.raises(NotFoundError):
        with store.unit_of_work() as uow:
            uow.after_commit(lambda: ran.append("rolled back"))
            uow.require(Collection.USERS, 42, "User")
    assert ran == ["committed"]
