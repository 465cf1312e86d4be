"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Iterable, List

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Collection
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..store.codec import ENCODERS, user_to_dict

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    InvalidStateError: 409,
}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def json_objects(value: Any, field_name: str) -> List[Dict[str, Any]]:
    """A JSON list whose items are all objects; missing or null reads as empty."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValidationError(f"{field_name} must be a list of objects")
    return value


def public_user(user) -> Dict[str, Any]:
    data = user_to_dict(user)
    data.pop("password", None)
    return data


def encode(collection: Collection, item) -> Dict[str, Any]:
    if collection == Collection.USERS:
        return public_user(item)
    return ENCODERS[collection](item)


def encode_all(collection: Collection, items: Iterable) -> list:
    return [encode(collection, i) for i in items]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in ERROR_STATUS.items() if isinstance(e, cls)), 400)
        return jsonify({"error": str(e)}), status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500
