from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from ..core.enums import Role
from .hierarchy import coerce_role


@dataclass(frozen=True)
class MenuItem:
    label: str
    path: str
    icon: str
    roles: frozenset[Role]
    children: Optional[tuple["MenuItem", ...]] = None

    def to_dict(self) -> dict:
        out = {
            "label": self.label,
            "path": self.path,
            "icon": self.icon,
            "roles": sorted(r.value for r in self.roles),
        }
        if self.children is not None:
            out["children"] = [c.to_dict() for c in self.children]
        return out


def _item(label: str, path: str, icon: str, *roles: Role) -> MenuItem:
    return MenuItem(label=label, path=path, icon=icon, roles=frozenset(roles))


MENU_ITEMS: tuple[MenuItem, ...] = (
    _item("Dashboard", "/dashboard", "dashboard", Role.ADMIN, Role.TEACHER, Role.STUDENT),
    _item("Users", "/dashboard/users", "users", Role.ADMIN),
    _item("Teachers", "/dashboard/teachers", "users", Role.ADMIN),
    _item("Profile", "/dashboard/profile", "user", Role.TEACHER, Role.STUDENT),
    _item("Classes", "/dashboard/classes", "classroom", Role.ADMIN, Role.TEACHER),
    _item("Students", "/dashboard/students", "student", Role.ADMIN),
    _item("Attendance", "/dashboard/attendance/admin", "attendance", Role.ADMIN),
    _item("Attendance", "/dashboard/attendance", "attendance", Role.TEACHER, Role.STUDENT),
    _item("Reports", "/dashboard/reports", "chart", Role.ADMIN, Role.TEACHER),
    _item("Settings", "/dashboard/settings", "settings", Role.ADMIN),
)


def filter_menu_items(items: tuple[MenuItem, ...], role: Any) -> list[MenuItem]:
    r = coerce_role(role)
    if r is None:
        return []

    out: list[MenuItem] = []
    for item in items:
        if r not in item.roles:
            continue
        if item.children is not None:
            item = replace(item, children=tuple(c for c in item.children if r in c.roles))
        out.append(item)
    return out


def get_menu_items_for_role(role: Any) -> list[MenuItem]:
    """Sidebar entries visible to ``role``, in declaration order."""
    return filter_menu_items(MENU_ITEMS, role)
