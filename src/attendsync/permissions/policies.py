"""Navigation and feature permission tables.

Both lookups fail closed: an unknown key (or role) is always denied.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from ..core.enums import Role
from .hierarchy import coerce_role

_ALL = frozenset({Role.ADMIN, Role.TEACHER, Role.STUDENT})
_STAFF = frozenset({Role.ADMIN, Role.TEACHER})
_ADMIN = frozenset({Role.ADMIN})
_TEACHER = frozenset({Role.TEACHER})

NAVIGATION_PERMISSIONS: Mapping[str, frozenset[Role]] = MappingProxyType(
    {
        "dashboard": _ALL,
        "userManagement": _ADMIN,
        "createUser": _ADMIN,
        "classManagement": _STAFF,
        "createClass": _ADMIN,
        "studentManagement": _STAFF,
        "attendanceManagement": _ALL,
        "markAttendance": _TEACHER,
        "viewAllAttendance": _ADMIN,
        "reports": _STAFF,
        "systemSettings": _ADMIN,
    }
)

FEATURE_PERMISSIONS: Mapping[str, Callable[[Role], bool]] = MappingProxyType(
    {
        "viewSystemStats": lambda role: role == Role.ADMIN,
        "manageUsers": lambda role: role == Role.ADMIN,
        "viewAllStudents": lambda role: role in (Role.ADMIN, Role.TEACHER),
        "markAttendance": lambda role: role == Role.TEACHER,
        "viewAttendanceReports": lambda role: role in (Role.ADMIN, Role.TEACHER),
        "createClasses": lambda role: role == Role.ADMIN,
    }
)


def has_permission(role: Any, permission: str) -> bool:
    allowed = NAVIGATION_PERMISSIONS.get(permission)
    r = coerce_role(role)
    return bool(allowed) and r is not None and r in allowed


def can_access_feature(role: Any, feature: str) -> bool:
    predicate = FEATURE_PERMISSIONS.get(feature)
    r = coerce_role(role)
    if predicate is None or r is None:
        return False
    return bool(predicate(r))


@dataclass(frozen=True)
class RoleAccess:
    has_access: bool
    is_authenticated: bool


def check_role_access(role: Any, allowed_roles: Iterable[Role]) -> RoleAccess:
    """Route-guard decision: callers redirect (or answer 401/403) when access is denied."""
    r = coerce_role(role)
    if r is None:
        return RoleAccess(has_access=False, is_authenticated=role is not None)
    return RoleAccess(has_access=r in frozenset(allowed_roles), is_authenticated=True)
