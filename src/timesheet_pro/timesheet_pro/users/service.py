from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..approvals.visibility import VisibilityResolver
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.enums import Collection, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..store.entity_store import EntityStore, UnitOfWork
from .model import User, UserDraft

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
APPROVER_ROLES = (Role.ADMIN, Role.MANAGER, Role.TEAM_LEADER)
RECOGNIZABLE_ROLES = (Role.EMPLOYEE, Role.TEAM_LEADER)


def _normalize_email(email: str) -> str:
    email = require_non_empty(email, "Email").lower()
    if "@" not in email:
        raise ValidationError("Email is not valid")
    return email


def _company_members(users: Iterable[User], company: str) -> List[User]:
    key = company.strip().lower()
    return [u for u in users if u.company.strip().lower() == key]


def _ensure_email_free(users: Iterable[User], company: str, email: str, *, exclude_id: Optional[int] = None) -> None:
    for u in _company_members(users, company):
        if u.email.lower() == email and u.user_id != exclude_id:
            raise ValidationError("An account with this email already exists")


def _validate_manager(users: Sequence[User], company: str, role: Role, manager_id: Optional[int], user_id: int) -> Optional[int]:
    """Employees and team leaders report to an admin, manager or (for employees) team leader."""
    if role not in RECOGNIZABLE_ROLES:
        return None
    if manager_id is None:
        raise ValidationError("Please select a manager for this company")
    if int(manager_id) == user_id:
        raise ValidationError("A user cannot be their own manager")
    manager = next((u for u in _company_members(users, company) if u.user_id == int(manager_id)), None)
    if manager is None:
        raise NotFoundError(f"Manager {manager_id} not found")
    if manager.role not in APPROVER_ROLES:
        raise ValidationError("Selected manager cannot approve requests")
    if role == Role.TEAM_LEADER and manager.role == Role.TEAM_LEADER:
        raise ValidationError("A team leader cannot report to another team leader")
    return manager.user_id


class AuthService:
    """Use case: sign up and authenticate (login)."""

    def __init__(self, store: EntityStore):
        self._store = store

    def signup(self, draft: UserDraft) -> User:
        """First user of a company becomes its ADMIN; later users join as EMPLOYEE."""
        name = require_non_empty(draft.name, "Name")
        email = _normalize_email(draft.email)
        require_min_length(draft.password, "Password", MIN_PASSWORD_LENGTH)
        company = require_non_empty(draft.company, "Company")

        with self._store.unit_of_work() as uow:
            users = uow.get(Collection.USERS)
            members = _company_members(users, company)
            _ensure_email_free(users, company, email)
            user_id = uow.next_id(Collection.USERS)

            if members:
                role = Role.EMPLOYEE
                company = members[0].company
                manager_id = _validate_manager(users, company, role, draft.manager_id, user_id)
            else:
                role = Role.ADMIN
                manager_id = None

            user = User(
                user_id=user_id,
                name=name,
                email=email,
                password_hash=generate_password_hash(draft.password),
                role=role,
                company=company,
                manager_id=manager_id,
                employee_code=optional_text(draft.employee_code, "Employee id"),
                designation=optional_text(draft.designation, "Designation"),
                phone=optional_text(draft.phone, "Phone"),
                address=optional_text(draft.address, "Address"),
                dob=draft.dob,
            )
            uow.replace(Collection.USERS, users + (user,))
        logger.info("User %s signed up for %s as %s", user.user_id, user.company, user.role.value)
        return user

    def authenticate(self, email: str, password: str) -> User:
        if not isinstance(password, str):
            raise AuthenticationError("Invalid email or password")
        key = str(email or "").strip().lower()
        for user in self._store.get(Collection.USERS):
            if user.email.lower() != key:
                continue
            try:
                ok = check_password_hash(user.password_hash, password)
            except ValueError:
                # e.g. placeholder or corrupted hashes
                ok = False
            if ok:
                return user
        raise AuthenticationError("Invalid email or password")


class UserService:
    """Use case: manage company users and recognition."""

    def __init__(self, store: EntityStore, resolver: VisibilityResolver):
        self._store = store
        self._resolver = resolver

    def get(self, user_id: int) -> User:
        user = next((u for u in self._store.get(Collection.USERS) if u.user_id == int(user_id)), None)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def _actor(self, uow: UnitOfWork, actor_id: int) -> User:
        return uow.require(Collection.USERS, int(actor_id), "User")

    @staticmethod
    def _company_target(uow: UnitOfWork, actor: User, user_id: int) -> User:
        target = uow.find(Collection.USERS, int(user_id))
        if target is None or target.company != actor.company:
            raise NotFoundError(f"User {user_id} not found")
        return target

    def list_company_users(self, *, actor_id: int) -> List[User]:
        """Team leaders see their direct reports; other roles see the whole company."""
        actor = self.get(actor_id)
        users = self._store.get(Collection.USERS)
        if actor.role == Role.TEAM_LEADER:
            return self._resolver.team_members(actor, users)
        return [u for u in users if u.company == actor.company]

    def list_managers(self, *, company: str) -> List[User]:
        """Who a new member of `company` can pick as manager at signup."""
        return [u for u in _company_members(self._store.get(Collection.USERS), company) if u.role in APPROVER_ROLES]

    def create_user(self, *, actor_id: int, draft: UserDraft) -> User:
        name = require_non_empty(draft.name, "Name")
        email = _normalize_email(draft.email)
        require_min_length(draft.password, "Password", MIN_PASSWORD_LENGTH)

        with self._store.unit_of_work() as uow:
            actor = self._actor(uow, actor_id)
            if not self._resolver.capabilities(actor).can_manage_users:
                raise AuthorizationError("You do not have permission to create users")
            role = draft.role or Role.EMPLOYEE
            if role == Role.ADMIN and actor.role != Role.ADMIN:
                raise AuthorizationError("Only an admin can create another admin")

            users = uow.get(Collection.USERS)
            _ensure_email_free(users, actor.company, email)
            user_id = uow.next_id(Collection.USERS)
            user = User(
                user_id=user_id,
                name=name,
                email=email,
                password_hash=generate_password_hash(draft.password),
                role=role,
                company=actor.company,
                manager_id=_validate_manager(users, actor.company, role, draft.manager_id, user_id),
                employee_code=optional_text(draft.employee_code, "Employee id"),
                designation=optional_text(draft.designation, "Designation"),
                phone=optional_text(draft.phone, "Phone"),
                address=optional_text(draft.address, "Address"),
                dob=draft.dob,
            )
            uow.replace(Collection.USERS, users + (user,))
        logger.info("User %s created by user %s", user.user_id, actor.user_id)
        return user

    def update_user(self, *, actor_id: int, user_id: int, draft: UserDraft) -> User:
        """Self-service profile edit, or an admin editing a company member.

        Role and manager changes are admin-only; an empty password keeps the old one.
        """
        with self._store.unit_of_work() as uow:
            actor = self._actor(uow, actor_id)
            target = self._company_target(uow, actor, user_id)
            is_admin = actor.role == Role.ADMIN
            if actor.user_id != target.user_id and not is_admin:
                raise AuthorizationError("You can only edit your own profile")

            role = target.role
            manager_id = target.manager_id
            if is_admin:
                role = draft.role or target.role
                manager_id = draft.manager_id if draft.manager_id is not None else target.manager_id
            elif draft.role is not None and draft.role != target.role:
                raise AuthorizationError("Only an admin can change roles")

            users = uow.get(Collection.USERS)
            email = _normalize_email(draft.email)
            _ensure_email_free(users, target.company, email, exclude_id=target.user_id)

            password_hash = target.password_hash
            if draft.password:
                require_min_length(draft.password, "Password", MIN_PASSWORD_LENGTH)
                password_hash = generate_password_hash(draft.password)

            updated = replace(
                target,
                name=require_non_empty(draft.name, "Name"),
                email=email,
                password_hash=password_hash,
                role=role,
                manager_id=_validate_manager(users, target.company, role, manager_id, target.user_id),
                employee_code=optional_text(draft.employee_code, "Employee id"),
                designation=optional_text(draft.designation, "Designation"),
                phone=optional_text(draft.phone, "Phone"),
                address=optional_text(draft.address, "Address"),
                dob=draft.dob,
            )
            uow.replace(Collection.USERS, tuple(updated if u.user_id == updated.user_id else u for u in users))
        logger.info("User %s updated by user %s", user_id, actor_id)
        return updated

    def delete_user(self, *, actor_id: int, user_id: int) -> None:
        """Admin-only. Timesheets, leave and projects keep their references to the user."""
        with self._store.unit_of_work() as uow:
            actor = self._actor(uow, actor_id)
            if not self._resolver.capabilities(actor).can_delete_users:
                raise AuthorizationError("Only an admin can delete users")
            target = self._company_target(uow, actor, user_id)
            if target.user_id == actor.user_id:
                raise ValidationError("You cannot delete your own account")
            uow.replace(Collection.USERS, tuple(u for u in uow.get(Collection.USERS) if u.user_id != target.user_id))
        logger.info("User %s deleted by user %s", user_id, actor_id)

    def _set_recognition(self, collection: Collection, *, actor_id: int, user_ids: Iterable[int]) -> List[int]:
        with self._store.unit_of_work() as uow:
            actor = self._actor(uow, actor_id)
            if not self._resolver.capabilities(actor).can_set_best_employee:
                raise AuthorizationError("Only managers and team leaders can set the best employee")
            chosen = list(dict.fromkeys(int(i) for i in user_ids))
            for uid in chosen:
                if self._company_target(uow, actor, uid).role not in RECOGNIZABLE_ROLES:
                    raise ValidationError("Only employees and team leaders can be recognized")

            company_ids = {u.user_id for u in uow.get(Collection.USERS) if u.company == actor.company}
            others = [i for i in uow.get(collection) if i not in company_ids]
            uow.replace(collection, others + chosen)
        return chosen

    def set_best_employees(self, *, actor_id: int, user_ids: Iterable[int]) -> List[int]:
        return self._set_recognition(Collection.BEST_EMPLOYEE_IDS, actor_id=actor_id, user_ids=user_ids)

    def set_best_employee_of_year(self, *, actor_id: int, user_ids: Iterable[int]) -> List[int]:
        return self._set_recognition(Collection.BEST_EMPLOYEE_OF_YEAR_IDS, actor_id=actor_id, user_ids=user_ids)

    def best_employees(self, *, company: str) -> dict:
        company_ids = {u.user_id for u in self._store.get(Collection.USERS) if u.company == company}
        return {
            "month": [i for i in self._store.get(Collection.BEST_EMPLOYEE_IDS) if i in company_ids],
            "year": [i for i in self._store.get(Collection.BEST_EMPLOYEE_OF_YEAR_IDS) if i in company_ids],
        }
