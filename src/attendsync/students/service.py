from __future__ import annotations

import logging
import math
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..attendance.stats import summarize
from ..classes.repository import ClassRepository
from ..common.formatting import format_address_with_info
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions.hierarchy import coerce_role
from ..permissions.policies import has_permission
from ..users.repository import UserRepository
from ..users.service import require_user_with_role
from .repository import StudentRepository
from .validation import validate_student_data

logger = logging.getLogger(__name__)


class StudentService:
    def __init__(
        self,
        students: StudentRepository,
        classes: ClassRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
    ):
        self._students = students
        self._classes = classes
        self._users = users
        self._attendance = attendance

    def _with_class(self, student) -> dict:
        data = student.to_dict()
        school_class = self._classes.get_by_id(student.class_id)
        data["class"] = school_class.to_dict() if school_class else None
        return data

    def add_student(
        self,
        *,
        current_role: Role,
        actor_id: Optional[int],
        roll_no: str,
        class_id,
        user_id: Optional[int] = None,
        address: Optional[str] = None,
        date_of_birth: Optional[str] = None,
        gender: Optional[str] = None,
    ) -> int:
        """Enrol a student. ``actor_id`` is the caller, ``user_id`` the student's own login."""
        if not has_permission(current_role, "studentManagement"):
            raise AuthorizationError("You are not allowed to add students")

        validate_student_data(roll_no, class_id, classes=self._classes, students=self._students)

        school_class = self._classes.get_by_id(class_id)
        if coerce_role(current_role) == Role.TEACHER and school_class.teacher_id != actor_id:
            logger.warning("teacher %s tried to add a student to class_id=%s", actor_id, class_id)
            raise AuthorizationError("You can only add students to your own classes")

        if user_id is not None:
            require_user_with_role(self._users, user_id, Role.STUDENT, "Linked user")
            if self._students.get_by_user_id(user_id):
                raise ValidationError("Student account is already linked to another student")

        student_id = self._students.create_student(
            user_id=user_id,
            roll_no=roll_no,
            class_id=class_id,
            address=format_address_with_info(address, date_of_birth, gender),
        )
        logger.info("student added student_id=%s class_id=%s", student_id, class_id)
        return student_id

    def list_by_class(
        self,
        *,
        current_role: Role,
        user_id: int,
        class_id,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        search: Optional[str] = None,
    ) -> dict:
        if not has_permission(current_role, "studentManagement"):
            raise AuthorizationError("You are not allowed to view students")
        if not class_id:
            raise ValidationError("Class ID is required")

        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise ValidationError("Class does not exist")

        if coerce_role(current_role) == Role.TEACHER and school_class.teacher_id != user_id:
            raise AuthorizationError("You are not authorized to view this class")

        page = max(int(page), 1)
        limit = max(int(limit), 1)
        rows, total = self._students.list_by_class(
            class_id=class_id,
            offset=(page - 1) * limit,
            limit=limit,
            search=(search or "").strip() or None,
        )
        return {
            "students": [s.to_dict() for s in rows],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        }

    def get_by_id(self, *, current_role: Role, user_id: int, student_id: int) -> dict:
        """One student with class and attendance totals, for staff."""
        if not has_permission(current_role, "studentManagement"):
            raise AuthorizationError("You are not allowed to view students")

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")

        data = self._with_class(student)
        school_class = data["class"]
        if coerce_role(current_role) == Role.TEACHER and school_class and school_class["teacher_id"] != user_id:
            raise AuthorizationError("You can only view students from your classes")

        data["attendance_stats"] = summarize(self._attendance.list_for_student(student.student_id))
        return data

    def profile(self, *, user_id: int) -> dict:
        """The logged-in student's own record."""
        student = self._students.get_by_user_id(user_id)
        if not student:
            raise NotFoundError("Student profile not found")

        data = self._with_class(student)
        user = self._users.get_by_id(user_id)
        if user:
            data["email"] = user.email
            data["phone"] = user.phone
        return data
