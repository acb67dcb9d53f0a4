from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role
from ..permissions.hierarchy import coerce_role
from ..permissions.policies import check_role_access


def current_role() -> Optional[Role]:
    return coerce_role(session.get("role"))


def current_user_id() -> Optional[int]:
    return session.get("user_id")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def require_role(*roles: Role):
    """401 without a session, 403 when the session role is not in ``roles``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Unauthorized"}), 401

            access = check_role_access(session.get("role"), roles)
            if not access.has_access:
                return jsonify({"success": False, "message": "Access denied"}), 403

            return view(*args, **kwargs)

        return wrapper

    return decorator


require_admin = require_role(Role.ADMIN)
require_teacher = require_role(Role.TEACHER, Role.ADMIN)
require_student = require_role(Role.STUDENT, Role.ADMIN)


def ok(data=None, message: str = "OK", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status
