from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from attendsync.core.enums import Role
from attendsync.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from attendsync.users.service import AuthService, UserService


def _create(svc, **overrides):
    kwargs = dict(
        current_role=Role.ADMIN,
        name="New Teacher",
        email="New.Teacher@School.test",
        password="longenough",
        role="TEACHER",
    )
    kwargs.update(overrides)
    return svc.create_user(**kwargs)


def test_admin_creates_teacher_with_hashed_password(users_repo):
    svc = UserService(users_repo)
    uid = _create(svc)

    user = users_repo.get_by_id(uid)
    assert user.role == Role.TEACHER
    assert user.email == "new.teacher@school.test"
    assert check_password_hash(user.password_hash, "longenough")


def test_admin_cannot_create_another_admin(users_repo):
    with pytest.raises(ValidationError, match="Invalid role"):
        _create(UserService(users_repo), role=Role.ADMIN)


def test_teacher_cannot_create_users(users_repo):
    with pytest.raises(AuthorizationError):
        _create(UserService(users_repo), current_role=Role.TEACHER, role=Role.STUDENT)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": " "}, "Name is required"),
        ({"email": "not-an-email"}, "Invalid email address"),
        ({"password": "short"}, "at least 8"),
        ({"email": "tess@school.test"}, "User already exists"),
    ],
)
def test_create_user_validation(users_repo, overrides, message):
    with pytest.raises(ValidationError, match=message):
        _create(UserService(users_repo), **overrides)


def test_delete_respects_hierarchy(users_repo):
    svc = UserService(users_repo)

    with pytest.raises(AuthorizationError):
        svc.delete_user(current_role=Role.ADMIN, user_id=1)

    svc.delete_user(current_role=Role.ADMIN, user_id=2)
    assert users_repo.get_by_id(2) is None


def test_delete_unknown_user(users_repo):
    with pytest.raises(NotFoundError):
        UserService(users_repo).delete_user(current_role=Role.ADMIN, user_id=999)


def test_system_stats_admin_only(users_repo, classes_repo, students_repo, attendance_repo):
    svc = UserService(users_repo, classes=classes_repo, students=students_repo, attendance=attendance_repo)

    assert svc.system_stats(current_role=Role.ADMIN) == {
        "total_users": 4,
        "total_classes": 2,
        "total_students": 3,
        "total_attendance": 0,
    }
    with pytest.raises(AuthorizationError):
        svc.system_stats(current_role=Role.TEACHER)


def test_authenticate(users_repo):
    auth = AuthService(users_repo)

    s_user = auth.authenticate("TESS@school.test", "Secret123!")
    assert s_user.user_id == 2
    assert s_user.role == Role.TEACHER

    with pytest.raises(AuthenticationError):
        auth.authenticate("tess@school.test", "wrong")
    with pytest.raises(AuthenticationError):
        auth.authenticate("nobody@school.test", "Secret123!")


def test_change_password(users_repo):
    auth = AuthService(users_repo)

    auth.change_password(user_id=2, old_password="Secret123!", new_password="BrandNew456")

    assert auth.authenticate("tess@school.test", "BrandNew456").user_id == 2
    with pytest.raises(AuthenticationError):
        auth.authenticate("tess@school.test", "Secret123!")


@pytest.mark.parametrize(
    "old, new, error",
    [
        ("", "BrandNew456", ValidationError),
        ("wrong-password", "BrandNew456", AuthenticationError),
        ("Secret123!", "Secret123!", ValidationError),
        ("Secret123!", "short", ValidationError),
    ],
)
def test_change_password_rejections(users_repo, old, new, error):
    before = users_repo.get_by_id(2).password_hash

    with pytest.raises(error):
        AuthService(users_repo).change_password(user_id=2, old_password=old, new_password=new)

    assert users_repo.get_by_id(2).password_hash == before


def test_teacher_profile_lists_own_classes(users_repo, classes_repo):
    svc = UserService(users_repo, classes=classes_repo)

    data = svc.profile(user_id=2)
    assert data["email"] == "tess@school.test"
    assert [c["class_id"] for c in data["classes"]] == ["class1"]
    assert "password_hash" not in data


def test_update_profile_ignores_blank_fields(users_repo, classes_repo):
    svc = UserService(users_repo, classes=classes_repo)

    data = svc.update_profile(user_id=2, name="  Tessa ", phone="")
    assert data["name"] == "Tessa"
    assert data["phone"] is None

    with pytest.raises(NotFoundError):
        svc.update_profile(user_id=999, name="Ghost")
