"""Shared Flask helpers: access decorators, JSON serialization, error mapping."""
from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    InternalError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "error": "Authentication required"}), 401
        if session.get("role") != Role.ADMIN.value:
            return jsonify({"success": False, "error": "Admin access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def is_admin() -> bool:
    return session.get("role") == Role.ADMIN.value


def target_user_id(requested) -> int:
    """Admins may act on any user; students only on themselves."""
    if requested in (None, ""):
        return current_user_id()
    try:
        uid = int(requested)
    except (TypeError, ValueError):
        raise ValidationError("Invalid user id")
    if uid != current_user_id() and not is_admin():
        raise AuthorizationError("Admin access required")
    return uid


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def serialize(value: Any) -> Any:
    """Dataclasses/enums/dates -> JSON-friendly primitives."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: serialize(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


def register_error_handlers(app: Flask) -> None:
    def handle_domain_error(e: DomainError):
        for error_cls, status in _STATUS_BY_ERROR:
            if isinstance(e, error_cls):
                if status == 404:
                    return jsonify({"success": False, "error": "Not found"}), 404
                return jsonify({"success": False, "error": str(e)}), status
        if isinstance(e, InternalError):
            logger.error("Internal error on %s %s: %s", request.method, request.path, e)
        else:
            logger.error("Unmapped domain error on %s %s: %r", request.method, request.path, e)
        return jsonify({"success": False, "error": "Internal server error"}), 500

    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "error": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "Internal server error"}), 500

    app.register_error_handler(DomainError, handle_domain_error)
    app.register_error_handler(Exception, handle_unexpected)
