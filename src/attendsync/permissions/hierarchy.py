from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..core.enums import Role

ROLE_HIERARCHY: Mapping[Role, int] = MappingProxyType(
    {
        Role.ADMIN: 100,
        Role.TEACHER: 50,
        Role.STUDENT: 10,
    }
)

ROLE_NAMES: Mapping[Role, str] = MappingProxyType(
    {
        Role.ADMIN: "Administrator",
        Role.TEACHER: "Teacher",
        Role.STUDENT: "Student",
    }
)


def coerce_role(value: Any) -> Optional[Role]:
    """Accept a Role or its string value (as stored in the session); None if unknown."""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def get_role_hierarchy(role: Any) -> int:
    r = coerce_role(role)
    return ROLE_HIERARCHY.get(r, 0) if r else 0


def can_manage_role(manager_role: Any, target_role: Any) -> bool:
    # Strict: equal weights never manage each other.
    return get_role_hierarchy(manager_role) > get_role_hierarchy(target_role)


def get_available_roles(current_user_role: Any) -> frozenset[Role]:
    """Roles the caller may assign when creating a user."""
    current = get_role_hierarchy(current_user_role)
    return frozenset(r for r, weight in ROLE_HIERARCHY.items() if weight < current)


def role_display_name(role: Any) -> str:
    r = coerce_role(role)
    return ROLE_NAMES.get(r, "Unknown") if r else "Unknown"
