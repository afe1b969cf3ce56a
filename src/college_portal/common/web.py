"""Shared pieces of the JSON controllers: session guards, response helpers, error mapping."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..accounts.model import SessionUser
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    PartialPaymentError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


def current_user() -> Optional[SessionUser]:
    data = session.get(SESSION_KEY)
    if not data:
        return None
    return SessionUser.from_session(data)


def ok(payload: Optional[dict] = None, status: int = 200, **extra: Any):
    body = {"success": True}
    body.update(payload or {})
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int = 400, **extra: Any):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return fail("Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    """Allow only the given roles. Teachers with the admin flag pass admin checks."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                return fail("Please sign in to continue", 401)
            allowed = user.role in roles or (Role.ADMIN in roles and user.has_admin_rights)
            if not allowed:
                return fail("You do not have access to this page", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


admin_required = roles_required(Role.ADMIN)
teacher_required = roles_required(Role.TEACHER, Role.ADMIN)
student_required = roles_required(Role.STUDENT)


def permission_required(check: str, message: str):
    """Require a truthy ``SessionUser`` property such as ``can_handle_accounts``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                return fail("Please sign in to continue", 401)
            if not getattr(user, check):
                return fail(message, 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


account_handler_required = permission_required("can_handle_accounts", "Only account handlers can do this")
librarian_required = permission_required("can_run_library", "Only librarians can do this")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return fail(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e: AuthenticationError):
        return fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e: AuthorizationError):
        return fail(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return fail(str(e), 404)

    @app.errorhandler(PartialPaymentError)
    def _partial_payment(e: PartialPaymentError):
        return fail(str(e), 500, paid_count=e.paid_count, total_count=e.total_count)

    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        return fail(str(e), 400)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return fail(f"Internal error: {e}", 500)
        return fail("Internal error", 500)
