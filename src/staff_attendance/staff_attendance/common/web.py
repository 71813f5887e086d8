"""Flask glue shared by the feature controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    PunchError,
    ValidationError,
)
from ..users.service import SessionUser

logger = logging.getLogger(__name__)


def store_session_user(user: SessionUser) -> None:
    session["user_id"] = user.user_id
    session["email"] = user.email
    session["role"] = user.role.value
    session["name"] = user.full_name


def load_session_user() -> Optional[SessionUser]:
    if "user_id" not in session:
        return None
    try:
        role = Role(session.get("role"))
    except ValueError:
        session.clear()
        return None
    return SessionUser(
        user_id=int(session["user_id"]),
        email=str(session.get("email") or ""),
        role=role,
        full_name=session.get("name"),
    )


def current_user() -> SessionUser:
    """Session user of the current request (set by ``login_required``)."""
    return g.current_user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = load_session_user()
        if user is None:
            return jsonify({"error": "Authentication required"}), 401
        g.current_user = user
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = load_session_user()
        if user is None:
            return jsonify({"error": "Authentication required"}), 401
        if user.role != Role.ADMIN:
            return jsonify({"error": "Admin access required"}), 403
        g.current_user = user
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error(message: str, status: int, code: Optional[str] = None):
    payload: dict[str, Any] = {"error": message}
    if code:
        payload["code"] = code
    return jsonify(payload), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(PunchError)
    def _punch_error(e: PunchError):
        logger.warning("punch rejected: %s", e.code)
        return _error(str(e), 400, e.code)

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication_error(e: AuthenticationError):
        return _error(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization_error(e: AuthorizationError):
        return _error(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return _error(str(e), 404)

    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        return _error(str(e), 400)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        # Let Flask render its own HTTP errors (404 routes, 405 methods, ...).
        if isinstance(e, HTTPException):
            return e
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return _error("Internal server error", 500)
