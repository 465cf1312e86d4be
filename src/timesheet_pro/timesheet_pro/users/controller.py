from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import coerce_optional_date
from ..common.web import current_user_id, json_body, login_required, public_user
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import UserDraft


def _role(value: Any) -> Optional[Role]:
    if value in (None, ""):
        return None
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Invalid role: {value!r}")


def _int_or_none(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid id: {value!r}")


def user_draft_from_json(data: Dict[str, Any], *, company: str = "") -> UserDraft:
    return UserDraft(
        name=data.get("name", ""),
        email=data.get("email", ""),
        password=data.get("password", ""),
        company=data.get("company", company),
        role=_role(data.get("role")),
        manager_id=_int_or_none(data.get("managerId")),
        employee_code=data.get("employeeId", ""),
        designation=data.get("designation", ""),
        phone=data.get("phone", ""),
        address=data.get("address", ""),
        dob=coerce_optional_date(data.get("dob"), "Date of birth"),
    )


def register(app: Flask, container: Container) -> None:
    def _login(user):
        session.clear()
        session["user_id"] = user.user_id
        session["role"] = user.role.value
        session["company"] = user.company

    @app.route("/api/signup", methods=["POST"], endpoint="signup")
    def signup():
        user = container.auth_service.signup(user_draft_from_json(json_body()))
        _login(user)
        return jsonify(public_user(user)), 201

    @app.route("/api/signup/managers", methods=["GET"], endpoint="signup_managers")
    def signup_managers():
        company = request.args.get("company", "")
        managers = container.user_service.list_managers(company=company)
        return jsonify([{"id": u.user_id, "name": u.name, "role": u.role.value} for u in managers])

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        _login(user)
        return jsonify(public_user(user))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(public_user(container.user_service.get(current_user_id())))

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @login_required
    def list_users():
        users = container.user_service.list_company_users(actor_id=current_user_id())
        return jsonify([public_user(u) for u in users])

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @login_required
    def create_user():
        user = container.user_service.create_user(actor_id=current_user_id(), draft=user_draft_from_json(json_body()))
        return jsonify(public_user(user)), 201

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @login_required
    def update_user(user_id: int):
        user = container.user_service.update_user(
            actor_id=current_user_id(),
            user_id=user_id,
            draft=user_draft_from_json(json_body()),
        )
        return jsonify(public_user(user))

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @login_required
    def delete_user(user_id: int):
        container.user_service.delete_user(actor_id=current_user_id(), user_id=user_id)
        return jsonify({"ok": True})

    @app.route("/api/best-employees", methods=["GET"], endpoint="best_employees")
    @login_required
    def best_employees():
        me = container.user_service.get(current_user_id())
        return jsonify(container.user_service.best_employees(company=me.company))

    @app.route("/api/best-employees", methods=["PUT"], endpoint="set_best_employees")
    @login_required
    def set_best_employees():
        data = json_body()
        service = container.user_service
        if "month" in data:
            service.set_best_employees(actor_id=current_user_id(), user_ids=data.get("month") or [])
        if "year" in data:
            service.set_best_employee_of_year(actor_id=current_user_id(), user_ids=data.get("year") or [])
        me = service.get(current_user_id())
        return jsonify(service.best_employees(company=me.company))
