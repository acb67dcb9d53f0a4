from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from attendsync.attendance.model import AttendanceRecord
from attendsync.classes.model import SchoolClass
from attendsync.container import wire
from attendsync.core.enums import AttendanceStatus, Role
from attendsync.core.exceptions import ValidationError
from attendsync.students.model import Student
from attendsync.users.model import User


class InMemoryUsers:
    def __init__(self, users=()):
        self._users: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self._users, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    def create_user(self, *, name, email, password_hash, role, phone=None) -> int:
        uid = self._next_id
        self._next_id += 1
        self._users[uid] = User(uid, name, email, password_hash, role, phone)
        return uid

    def update_password(self, user_id: int, password_hash: str) -> bool:
        if user_id not in self._users:
            return False
        self._users[user_id] = replace(self._users[user_id], password_hash=password_hash)
        return True

    def update_profile(self, user_id: int, *, name=None, phone=None) -> bool:
        user = self._users.get(user_id)
        if not user:
            return False
        changes = {k: v for k, v in (("name", name), ("phone", phone)) if v is not None}
        self._users[user_id] = replace(user, **changes)
        return True

    def delete_by_id(self, user_id: int) -> bool:
        return self._users.pop(user_id, None) is not None

    def list_all(self):
        return list(self._users.values())

    def count_all(self) -> int:
        return len(self._users)


class InMemoryClasses:
    def __init__(self, classes=()):
        self._classes: dict = {c.class_id: c for c in classes}
        self._next_id = 100
        self.calls: list[str] = []

    def get_by_id(self, class_id) -> Optional[SchoolClass]:
        self.calls.append("get_by_id")
        return self._classes.get(class_id)

    def find_duplicate(self, *, name, subject, teacher_id):
        return next(
            (c for c in self._classes.values() if (c.name, c.subject, c.teacher_id) == (name, subject, teacher_id)),
            None,
        )

    def create_class(self, *, name, section, subject, teacher_id) -> int:
        cid = self._next_id
        self._next_id += 1
        self._classes[cid] = SchoolClass(cid, name, subject, section, teacher_id)
        return cid

    def list_all(self, *, teacher_id=None):
        return [c for c in self._classes.values() if teacher_id is None or c.teacher_id == teacher_id]

    def count_all(self) -> int:
        return len(self._classes)


class InMemoryStudents:
    """Mirrors the UNIQUE (roll_no, class_id) and UNIQUE (user_id) keys of the real table."""

    def __init__(self, students=()):
        self._students: dict[int, Student] = {s.student_id: s for s in students}
        self._next_id = max(self._students, default=0) + 1
        self.calls: list[str] = []

    def get_by_id(self, student_id):
        return self._students.get(student_id)

    def get_by_user_id(self, user_id):
        return next((s for s in self._students.values() if s.user_id == user_id), None)

    def find_by_roll_and_class(self, roll_no, class_id):
        self.calls.append("find_by_roll_and_class")
        return next(
            (s for s in self._students.values() if s.roll_no == roll_no and s.class_id == class_id),
            None,
        )

    def create_student(self, *, user_id, roll_no, class_id, address) -> int:
        if any(s.roll_no == roll_no and s.class_id == class_id for s in self._students.values()):
            raise ValidationError("Roll number already exists in this class")
        if user_id is not None and self.get_by_user_id(user_id):
            raise ValidationError("Student account is already linked to another student")
        sid = self._next_id
        self._next_id += 1
        self._students[sid] = Student(sid, roll_no, class_id, user_id=user_id, address=address)
        return sid

    def list_by_class(self, *, class_id, offset, limit, search=None):
        rows = sorted(
            (s for s in self._students.values() if s.class_id == class_id and s.is_active),
            key=lambda s: s.roll_no,
        )
        if search:
            rows = [s for s in rows if s.name and search.lower() in s.name.lower()]
        return rows[offset:offset + limit], len(rows)

    def list_all(self):
        return list(self._students.values())

    def count_all(self) -> int:
        return len(self._students)


class InMemoryAttendance:
    def __init__(self):
        self._records: dict[tuple, AttendanceRecord] = {}

    def get(self, *, student_id, class_id, attendance_date):
        return self._records.get((student_id, class_id, attendance_date))

    def upsert(self, *, student_id, class_id, teacher_id, attendance_date, status):
        key = (student_id, class_id, attendance_date)
        existing = self._records.get(key)
        if existing:
            record = replace(existing, status=status, teacher_id=teacher_id)
        else:
            record = AttendanceRecord(len(self._records) + 1, student_id, class_id, teacher_id, attendance_date, status)
        self._records[key] = record
        return record

    def list_for_student(self, student_id):
        rows = [r for r in self._records.values() if r.student_id == student_id]
        return sorted(rows, key=lambda r: r.attendance_date, reverse=True)

    def list_for_class(self, *, class_id, start_date: Optional[date] = None, end_date: Optional[date] = None):
        return [
            r for r in self._records.values()
            if r.class_id == class_id
            and (start_date is None or start_date <= r.attendance_date)
            and (end_date is None or r.attendance_date <= end_date)
        ]

    def list_for_class_and_date(self, *, class_id, attendance_date: date):
        return [r for r in self._records.values() if r.class_id == class_id and r.attendance_date == attendance_date]

    def counts_by_student(self):
        counts: dict = {}
        for r in self._records.values():
            present, total = counts.get(r.student_id, (0, 0))
            counts[r.student_id] = (present + int(r.status == AttendanceStatus.PRESENT), total + 1)
        return counts

    def count_all(self) -> int:
        return len(self._records)


ADMIN_ID = 1
TEACHER_ID = 2
OTHER_TEACHER_ID = 3
STUDENT_USER_ID = 4


@pytest.fixture
def users_repo():
    pw = generate_password_hash("Secret123!")
    return InMemoryUsers(
        [
            User(ADMIN_ID, "Admin", "admin@school.test", pw, Role.ADMIN),
            User(TEACHER_ID, "Tess", "tess@school.test", pw, Role.TEACHER),
            User(OTHER_TEACHER_ID, "Omar", "omar@school.test", pw, Role.TEACHER),
            User(STUDENT_USER_ID, "Sam", "sam@school.test", pw, Role.STUDENT),
        ]
    )


@pytest.fixture
def classes_repo():
    return InMemoryClasses(
        [
            SchoolClass("class1", "10-A", "Maths", "A", TEACHER_ID),
            SchoolClass("class2", "10-B", "Physics", "B", OTHER_TEACHER_ID),
        ]
    )


@pytest.fixture
def students_repo():
    return InMemoryStudents(
        [
            Student(1, "R1", "class1", user_id=STUDENT_USER_ID, name="Sam"),
            Student(2, "R2", "class1", name="Alex"),
            Student(3, "R1", "class2", name="Kim"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def container(users_repo, classes_repo, students_repo, attendance_repo):
    return wire(
        users_repo=users_repo,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from attendsync.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    def _login(role: Role, user_id: int):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role.value
        return client

    return _login
