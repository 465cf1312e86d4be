from __future__ import annotations

import pytest

from src.timesheet_pro.timesheet_pro.core.enums import Collection, Role
from src.timesheet_pro.timesheet_pro.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.timesheet_pro.timesheet_pro.users.model import UserDraft


def _draft(email: str, company: str = "Acme", **kwargs) -> UserDraft:
    return UserDraft(name=kwargs.pop("name", "New Person"), email=email, password="secret123", company=company, **kwargs)


def test_first_user_of_new_company_becomes_admin(container):
    user = container.auth_service.signup(_draft("founder@initech.test", company="Initech"))
    assert user.role == Role.ADMIN
    assert user.manager_id is None


def test_joining_existing_company_requires_a_manager(container, world):
    with pytest.raises(ValidationError):
        container.auth_service.signup(_draft("new@acme.test"))

    user = container.auth_service.signup(_draft("new@acme.test", company="acme", manager_id=world.leader))
    assert user.role == Role.EMPLOYEE
    assert user.company == "Acme"
    assert user.manager_id == world.leader


def test_signup_manager_must_be_able_to_approve(container, world):
    with pytest.raises(ValidationError):
        container.auth_service.signup(_draft("new@acme.test", manager_id=world.bob))
    with pytest.raises(NotFoundError):
        container.auth_service.signup(_draft("new@acme.test", manager_id=world.outsider_manager))


def test_email_is_unique_case_insensitive(container):
    with pytest.raises(ValidationError):
        container.auth_service.signup(_draft("ALICE@acme.test", manager_id=2))


def test_authenticate(container):
    container.auth_service.signup(_draft("founder@initech.test", company="Initech"))

    assert container.auth_service.authenticate("Founder@Initech.test", "secret123").company == "Initech"
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("founder@initech.test", "wrong")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("nobody@initech.test", "secret123")


def test_signup_stores_only_a_hash(container, backend):
    container.auth_service.signup(_draft("founder@initech.test", company="Initech"))
    stored = backend.load()["users"][-1]
    assert stored["password"] != "secret123"


def test_manager_creates_user_in_own_company(container, world):
    user = container.user_service.create_user(
        actor_id=world.manager,
        draft=_draft("carl@acme.test", company="Globex", role=Role.TEAM_LEADER, manager_id=world.manager),
    )
    assert (user.company, user.role) == ("Acme", Role.TEAM_LEADER)


def test_only_admin_creates_admins(container, world):
    with pytest.raises(AuthorizationError):
        container.user_service.create_user(actor_id=world.manager, draft=_draft("boss@acme.test", role=Role.ADMIN))


def test_team_leader_cannot_create_users(container, world):
    with pytest.raises(AuthorizationError):
        container.user_service.create_user(actor_id=world.leader, draft=_draft("x@acme.test", manager_id=world.leader))


def test_self_edit_keeps_role_and_password(container, store, people, world):
    bob = people[world.bob]
    updated = container.user_service.update_user(
        actor_id=world.bob,
        user_id=world.bob,
        draft=UserDraft(name="Robert", email=bob.email, password="", company="", phone="555"),
    )
    assert (updated.name, updated.phone, updated.role) == ("Robert", "555", Role.EMPLOYEE)
    assert updated.password_hash == bob.password_hash
    assert updated.manager_id == world.manager


def test_employee_cannot_promote_self(container, people, world):
    bob = people[world.bob]
    with pytest.raises(AuthorizationError):
        container.user_service.update_user(
            actor_id=world.bob,
            user_id=world.bob,
            draft=UserDraft(name="Bob", email=bob.email, password="", company="", role=Role.MANAGER),
        )


def test_employee_cannot_edit_others(container, people, world):
    with pytest.raises(AuthorizationError):
        container.user_service.update_user(
            actor_id=world.bob,
            user_id=world.alice,
            draft=UserDraft(name="A", email="alice@acme.test", password="", company=""),
        )


def test_delete_user_leaves_records_behind(container, store, world):
    from src.timesheet_pro.timesheet_pro.timesheets.model import TimesheetDraft

    container.timesheet_service.submit_timesheet(
        owner_id=world.bob,
        draft=TimesheetDraft(
            date="2024-03-14",
            project_work=({"project_id": world.phoenix, "work_entries": [{"description": "x", "hours": 1}]},),
        ),
    )
    container.user_service.delete_user(actor_id=world.admin, user_id=world.bob)

    assert all(u.user_id != world.bob for u in store.get(Collection.USERS))
    assert store.get(Collection.TIMESHEETS)[0].user_id == world.bob
    # the orphaned record is no longer visible to the company
    assert container.timesheet_service.list_reviewable(actor_id=world.manager) == []


def test_only_admin_deletes(container, world):
    with pytest.raises(AuthorizationError):
        container.user_service.delete_user(actor_id=world.manager, user_id=world.bob)
    with pytest.raises(ValidationError):
        container.user_service.delete_user(actor_id=world.admin, user_id=world.admin)
    with pytest.raises(NotFoundError):
        container.user_service.delete_user(actor_id=world.admin, user_id=world.outsider)


def test_list_company_users(container, world):
    everyone = container.user_service.list_company_users(actor_id=world.manager)
    team = container.user_service.list_company_users(actor_id=world.leader)
    assert {u.user_id for u in everyone} == {1, 2, 3, 4, 5}
    assert [u.user_id for u in team] == [world.alice]


def test_best_employees(container, world):
    service = container.user_service
    service.set_best_employees(actor_id=world.manager, user_ids=[world.alice, world.alice])
    service.set_best_employee_of_year(actor_id=world.leader, user_ids=[world.leader])

    assert service.best_employees(company="Acme") == {"month": [world.alice], "year": [world.leader]}

    with pytest.raises(ValidationError):
        service.set_best_employees(actor_id=world.manager, user_ids=[world.admin])
    with pytest.raises(AuthorizationError):
        service.set_best_employees(actor_id=world.admin, user_ids=[world.alice])
