from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..permissions.hierarchy import can_manage_role, coerce_role, get_available_roles
from ..permissions.policies import can_access_feature, has_permission
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def require_user_with_role(users: UserRepository, user_id, role: Role, label: str) -> User:
    """Resolve a referenced account and check it has ``role`` (e.g. a class's teacher)."""
    user = users.get_by_id(user_id)
    if not user or not user.is_active:
        raise ValidationError(f"{label} does not exist")
    if user.role != role:
        raise ValidationError(f"{label} must be a {role.value.lower()} account")
    return user


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self._users.get_by_email(email.strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.warning("failed login for user_id=%s", user.user_id)
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)

    def change_password(self, *, user_id: int, old_password: str, new_password: str) -> None:
        if not old_password or not new_password:
            raise ValidationError("Old password and new password are required")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        try:
            ok = check_password_hash(user.password_hash, old_password)
        except ValueError:
            ok = False
        if not ok:
            raise AuthenticationError("Invalid password")

        if old_password == new_password:
            raise ValidationError("New password cannot be same as old password")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        self._users.update_password(user_id, generate_password_hash(new_password))
        logger.info("password changed user_id=%s", user_id)


class UserService:
    """Use case: manage user accounts (admin)."""

    def __init__(self, users: UserRepository, *, classes=None, students=None, attendance=None):
        self._users = users
        self._classes = classes
        self._students = students
        self._attendance = attendance

    def create_user(
        self,
        *,
        current_role: Role,
        name: str,
        email: str,
        password: str,
        role,
        phone: Optional[str] = None,
    ) -> int:
        if not has_permission(current_role, "createUser"):
            raise AuthorizationError("You are not allowed to create users")

        target = coerce_role(role)
        if target is None or target not in get_available_roles(current_role):
            raise ValidationError("Invalid role for new user")

        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("User already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=target,
            phone=phone or None,
        )
        logger.info("user created user_id=%s role=%s", user_id, target.value)
        return user_id

    def list_users(self, *, current_role: Role) -> list[dict]:
        if not has_permission(current_role, "userManagement"):
            raise AuthorizationError("You are not allowed to view users")
        return [u.public_view() for u in self._users.list_all()]

    def delete_user(self, *, current_role: Role, user_id: int) -> None:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not can_manage_role(current_role, user.role):
            raise AuthorizationError("You cannot delete a user with an equal or higher role")

        if not self._users.delete_by_id(user_id):
            raise ValidationError("Failed to delete user")
        logger.info("user deleted user_id=%s", user_id)

    def profile(self, *, user_id: int) -> dict:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        data = user.public_view()
        if user.role == Role.TEACHER and self._classes:
            data["classes"] = [c.to_dict() for c in self._classes.list_all(teacher_id=user.user_id)]
        return data

    def update_profile(self, *, user_id: int, name: Optional[str] = None, phone: Optional[str] = None) -> dict:
        # Blank values leave the stored field untouched.
        name = (name or "").strip() or None
        phone = (phone or "").strip() or None

        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        self._users.update_profile(user_id, name=name, phone=phone)
        return self.profile(user_id=user_id)

    def system_stats(self, *, current_role: Role) -> dict:
        if not can_access_feature(current_role, "viewSystemStats"):
            raise AuthorizationError("You are not allowed to view system statistics")

        return {
            "total_users": self._users.count_all(),
            "total_classes": self._classes.count_all() if self._classes else 0,
            "total_students": self._students.count_all() if self._students else 0,
            "total_attendance": self._attendance.count_all() if self._attendance else 0,
        }
