from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pytest

from src.timesheet_pro.timesheet_pro.container import build_container
from src.timesheet_pro.timesheet_pro.core.enums import Collection, ProjectStatus, Role
from src.timesheet_pro.timesheet_pro.projects.model import Project
from src.timesheet_pro.timesheet_pro.store.memory_backend import MemoryBackend
from src.timesheet_pro.timesheet_pro.users.model import User

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0)


@dataclass(frozen=True)
class World:
    """Ids of the people and projects loaded by the `container` fixture.

    Acme: admin, manager, leader (reports to manager), alice (reports to
    leader), bob (reports to manager). Globex: outsider_manager, outsider.
    """

    admin: int = 1
    manager: int = 2
    leader: int = 3
    alice: int = 4
    bob: int = 5
    outsider_manager: int = 6
    outsider: int = 7

    phoenix: int = 10
    titan: int = 11
    globex_project: int = 20


def make_user(user_id: int, name: str, role: Role, *, manager_id=None, company: str = "Acme") -> User:
    return User(
        user_id=user_id,
        name=name,
        email=f"{name.lower()}@{company.lower()}.test",
        password_hash="not-a-real-hash",
        role=role,
        company=company,
        manager_id=manager_id,
    )


def world_users(w: World) -> list:
    return [
        make_user(w.admin, "Admin", Role.ADMIN),
        make_user(w.manager, "Maria", Role.MANAGER),
        make_user(w.leader, "Leo", Role.TEAM_LEADER, manager_id=w.manager),
        make_user(w.alice, "Alice", Role.EMPLOYEE, manager_id=w.leader),
        make_user(w.bob, "Bob", Role.EMPLOYEE, manager_id=w.manager),
        make_user(w.outsider_manager, "Olga", Role.MANAGER, company="Globex"),
        make_user(w.outsider, "Otto", Role.EMPLOYEE, manager_id=w.outsider_manager, company="Globex"),
    ]


def world_projects(w: World) -> list:
    return [
        Project(
            project_id=w.phoenix,
            name="Phoenix",
            manager_id=w.manager,
            company="Acme",
            team_leader_id=w.leader,
            team_ids=(w.alice, w.bob),
            estimated_hours=100,
            status=ProjectStatus.IN_PROGRESS,
        ),
        Project(project_id=w.titan, name="Titan", manager_id=w.manager, company="Acme", team_ids=(w.alice,)),
        Project(project_id=w.globex_project, name="Globex Ops", manager_id=w.outsider_manager, company="Globex"),
    ]


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def world():
    return World()


@pytest.fixture
def alerts():
    return []


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def container(backend, alerts, world):
    c = build_container(backend=backend, clock=lambda: FIXED_NOW, live_alert=alerts.append)
    c.store.replace(Collection.USERS, world_users(world))
    c.store.replace(Collection.PROJECTS, world_projects(world))
    return c


@pytest.fixture
def store(container):
    return container.store


@pytest.fixture
def users(world):
    return tuple(world_users(world))


@pytest.fixture
def people(users):
    """User objects by id."""
    return {u.user_id: u for u in users}
