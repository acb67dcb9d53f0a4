from __future__ import annotations

from datetime import date

import pytest

from attendsync.core.enums import AttendanceStatus, Role
from attendsync.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from attendsync.students.service import StudentService

TEACHER_ID = 2
OTHER_TEACHER_ID = 3


@pytest.fixture
def service(students_repo, classes_repo, users_repo, attendance_repo):
    return StudentService(students_repo, classes_repo, users_repo, attendance_repo)


def test_add_student_stores_formatted_address(service, students_repo):
    sid = service.add_student(
        current_role=Role.ADMIN,
        actor_id=1,
        roll_no="R3",
        class_id="class1",
        address="12 Elm St",
        date_of_birth="2000-01-01",
        gender="F",
    )

    assert students_repo.get_by_id(sid).address == "12 Elm St | DOB: 2000-01-01, Gender: F"


def test_student_cannot_add_students(service):
    with pytest.raises(AuthorizationError):
        service.add_student(current_role=Role.STUDENT, actor_id=4, roll_no="R3", class_id="class1")


def test_duplicate_rejected(service):
    with pytest.raises(ValidationError, match="already exists"):
        service.add_student(current_role=Role.TEACHER, actor_id=TEACHER_ID, roll_no="R2", class_id="class1")


def test_insert_constraint_catches_race(service, students_repo, monkeypatch):
    # Simulate a concurrent insert landing between the check and the write.
    monkeypatch.setattr(students_repo, "find_by_roll_and_class", lambda roll_no, class_id: None)

    with pytest.raises(ValidationError, match="already exists"):
        service.add_student(current_role=Role.ADMIN, actor_id=1, roll_no="R1", class_id="class1")


def test_list_by_class_paginates(service):
    data = service.list_by_class(current_role=Role.TEACHER, user_id=TEACHER_ID, class_id="class1", page=1, limit=1)

    assert [s["roll_no"] for s in data["students"]] == ["R1"]
    assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}


def test_teacher_cannot_list_foreign_class(service):
    with pytest.raises(AuthorizationError):
        service.list_by_class(current_role=Role.TEACHER, user_id=OTHER_TEACHER_ID, class_id="class1")


def test_admin_can_list_any_class(service):
    data = service.list_by_class(current_role=Role.ADMIN, user_id=1, class_id="class2")
    assert data["pagination"]["total"] == 1


def test_list_unknown_class(service):
    with pytest.raises(ValidationError, match="Class does not exist"):
        service.list_by_class(current_role=Role.ADMIN, user_id=1, class_id="nope")


def test_teacher_adds_to_own_class(service, students_repo):
    sid = service.add_student(current_role=Role.TEACHER, actor_id=TEACHER_ID, roll_no="R3", class_id="class1")
    assert students_repo.get_by_id(sid).class_id == "class1"


def test_teacher_cannot_add_to_foreign_class(service, students_repo):
    before = students_repo.count_all()

    with pytest.raises(AuthorizationError, match="your own classes"):
        service.add_student(current_role=Role.TEACHER, actor_id=OTHER_TEACHER_ID, roll_no="R9", class_id="class1")

    assert students_repo.count_all() == before


def test_link_new_student_account(service, students_repo, users_repo):
    uid = users_repo.create_user(name="Lee", email="lee@school.test", password_hash="x", role=Role.STUDENT)

    sid = service.add_student(current_role=Role.ADMIN, actor_id=1, roll_no="R3", class_id="class1", user_id=uid)
    assert students_repo.get_by_id(sid).user_id == uid


@pytest.mark.parametrize(
    "user_id, message",
    [
        (999, "Linked user does not exist"),
        (TEACHER_ID, "Linked user must be a student account"),
        (4, "already linked to another student"),
    ],
)
def test_linked_account_must_be_a_free_student(service, students_repo, user_id, message):
    before = students_repo.count_all()

    with pytest.raises(ValidationError, match=message):
        service.add_student(current_role=Role.ADMIN, actor_id=1, roll_no="R3", class_id="class1", user_id=user_id)

    assert students_repo.count_all() == before


def test_get_by_id_includes_class_and_stats(service, attendance_repo):
    attendance_repo.upsert(
        student_id=1,
        class_id="class1",
        teacher_id=TEACHER_ID,
        attendance_date=date(2026, 3, 2),
        status=AttendanceStatus.PRESENT,
    )

    data = service.get_by_id(current_role=Role.TEACHER, user_id=TEACHER_ID, student_id=1)
    assert data["class"]["name"] == "10-A"
    assert data["attendance_stats"]["total_classes"] == 1
    assert data["attendance_stats"]["attendance_percentage"] == 100.0


def test_get_by_id_scoping(service):
    with pytest.raises(AuthorizationError):
        service.get_by_id(current_role=Role.TEACHER, user_id=OTHER_TEACHER_ID, student_id=1)
    with pytest.raises(NotFoundError):
        service.get_by_id(current_role=Role.ADMIN, user_id=1, student_id=999)


def test_student_profile(service):
    data = service.profile(user_id=4)

    assert data["roll_no"] == "R1"
    assert data["email"] == "sam@school.test"
    assert data["class"]["class_id"] == "class1"

    with pytest.raises(NotFoundError, match="Student profile not found"):
        service.profile(user_id=TEACHER_ID)
