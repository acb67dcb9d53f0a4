from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization and role-based navigation."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
