from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..permissions.hierarchy import coerce_role
from ..permissions.policies import has_permission
from ..users.repository import UserRepository
from ..users.service import require_user_with_role
from .repository import ClassRepository

logger = logging.getLogger(__name__)


class ClassService:
    def __init__(self, classes: ClassRepository, users: UserRepository):
        self._classes = classes
        self._users = users

    def create_class(
        self,
        *,
        current_role: Role,
        teacher_id: Optional[int],
        name: str,
        subject: str,
        section: Optional[str] = None,
    ) -> int:
        if not has_permission(current_role, "createClass"):
            raise AuthorizationError("Only administrators can create classes")

        if not name or not subject:
            raise ValidationError("Name and subject are required")
        name = require_non_empty(name, "Name")
        subject = require_non_empty(subject, "Subject")
        if teacher_id is not None:
            require_user_with_role(self._users, teacher_id, Role.TEACHER, "Teacher")

        if self._classes.find_duplicate(name=name, subject=subject, teacher_id=teacher_id):
            raise ValidationError("Class already exists")

        class_id = self._classes.create_class(
            name=name,
            section=(section or "").strip() or None,
            subject=subject,
            teacher_id=teacher_id,
        )
        logger.info("class created class_id=%s teacher_id=%s", class_id, teacher_id)
        return class_id

    def list_classes(self, *, current_role: Role, user_id: int) -> list[dict]:
        if not has_permission(current_role, "classManagement"):
            raise AuthorizationError("You are not allowed to view classes")

        # Teachers only see the classes they teach.
        teacher_id = user_id if coerce_role(current_role) == Role.TEACHER else None
        return [c.to_dict() for c in self._classes.list_all(teacher_id=teacher_id)]
