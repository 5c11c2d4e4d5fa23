from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    ActiveRequestExistsError,
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    DomainError,
    InvalidTransitionError,
    NoCheckInFoundError,
    NotFoundError,
    OutsideCheckInRadiusError,
    PersistenceError,
    ValidationError,
)
from ..core.results import SideEffectWarning

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (AuthorizationError, 403),
    (AlreadyCheckedInError, 409),
    (AlreadyCheckedOutError, 409),
    (NoCheckInFoundError, 409),
    (ActiveRequestExistsError, 409),
    (InvalidTransitionError, 409),
    (ValidationError, 400),
)


def error_response(code: str, message: str, http_status: int, **extra):
    body = {"error": code, "message": message}
    body.update(extra)
    return jsonify(body), http_status


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def warnings_payload(warnings: Iterable[SideEffectWarning]) -> list[dict]:
    return [{"effect": w.effect, "message": w.message} for w in warnings]


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role", Role.EMPLOYEE.value))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("unauthorized", "Please sign in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def hr_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("unauthorized", "Please sign in to continue", 401)
        if session.get("role") != Role.HR_ADMIN.value:
            return error_response(AuthorizationError.code, "HR admin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        extra = {}
        if isinstance(e, ActiveRequestExistsError):
            extra = {"request_id": e.request_id, "status": e.status}
        elif isinstance(e, InvalidTransitionError) and e.current_status:
            extra = {"status": e.current_status}
        elif isinstance(e, OutsideCheckInRadiusError):
            extra = {"distance_meters": e.distance_meters, "radius_meters": e.radius_meters}
        return error_response(e.code, str(e), status_for(e), **extra)

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(e: PersistenceError):
        logger.error("Request %s %s failed in the database layer: %s", request.method, request.path, e)
        return error_response(PersistenceError.code, "A system error occurred, please try again", 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("internal_error", "A system error occurred, please try again", 500)
