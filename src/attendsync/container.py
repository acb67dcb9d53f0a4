from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .core.constants import LOW_ATTENDANCE_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    class_service: ClassService
    student_service: StudentService
    attendance_service: AttendanceService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    users_repo: UserRepository,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    low_threshold: int = LOW_ATTENDANCE_THRESHOLD,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""
    return Container(
        users_repo=users_repo,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(
            users_repo,
            classes=classes_repo,
            students=students_repo,
            attendance=attendance_repo,
        ),
        class_service=ClassService(classes_repo, users_repo),
        student_service=StudentService(students_repo, classes_repo, users_repo, attendance_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            students_repo,
            classes_repo,
            low_threshold=low_threshold,
        ),
        conn=conn,
    )


def build_container(*, db_config: dict, low_threshold: int = LOW_ATTENDANCE_THRESHOLD) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        users_repo=MySQLUserRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        low_threshold=low_threshold,
        conn=conn,
    )
