from __future__ import annotations

import pytest

from attendsync.classes.service import ClassService
from attendsync.core.enums import Role
from attendsync.core.exceptions import AuthorizationError, ValidationError


def test_admin_creates_class(classes_repo, users_repo):
    svc = ClassService(classes_repo, users_repo)
    cid = svc.create_class(current_role=Role.ADMIN, teacher_id=2, name="11-A", subject="Chemistry", section=" A ")

    created = classes_repo.get_by_id(cid)
    assert created.section == "A"
    assert created.teacher_id == 2


def test_only_admin_creates_classes(classes_repo, users_repo):
    with pytest.raises(AuthorizationError):
        ClassService(classes_repo, users_repo).create_class(current_role=Role.TEACHER, teacher_id=2, name="X", subject="Y")


def test_name_and_subject_required(classes_repo, users_repo):
    with pytest.raises(ValidationError, match="Name and subject are required"):
        ClassService(classes_repo, users_repo).create_class(current_role=Role.ADMIN, teacher_id=2, name="", subject="Maths")


def test_duplicate_class(classes_repo, users_repo):
    with pytest.raises(ValidationError, match="Class already exists"):
        ClassService(classes_repo, users_repo).create_class(current_role=Role.ADMIN, teacher_id=2, name="10-A", subject="Maths")


def test_teacher_sees_only_own_classes(classes_repo, users_repo):
    svc = ClassService(classes_repo, users_repo)

    assert [c["class_id"] for c in svc.list_classes(current_role=Role.TEACHER, user_id=2)] == ["class1"]
    assert len(svc.list_classes(current_role=Role.ADMIN, user_id=1)) == 2
    with pytest.raises(AuthorizationError):
        svc.list_classes(current_role=Role.STUDENT, user_id=4)


@pytest.mark.parametrize(
    "teacher_id, message",
    [(999, "Teacher does not exist"), (4, "Teacher must be a teacher account"), (1, "Teacher must be a teacher account")],
)
def test_class_teacher_must_be_a_teacher(classes_repo, users_repo, teacher_id, message):
    with pytest.raises(ValidationError, match=message):
        ClassService(classes_repo, users_repo).create_class(
            current_role=Role.ADMIN, teacher_id=teacher_id, name="12-C", subject="Biology"
        )

    assert classes_repo.count_all() == 2
