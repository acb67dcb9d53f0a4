from __future__ import annotations

import logging
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone, is_duplicate_key, is_missing_reference
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT s.student_id, s.user_id, s.roll_no, s.class_id, s.address, s.is_active, u.name
    FROM students s
    LEFT JOIN users u ON u.user_id = s.user_id
"""


def _to_student(row: dict) -> Student:
    return Student(
        student_id=int(row["student_id"]),
        roll_no=row["roll_no"],
        class_id=int(row["class_id"]),
        user_id=row.get("user_id"),
        name=row.get("name"),
        address=row.get("address"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.student_id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def find_by_roll_and_class(self, roll_no: str, class_id: int) -> Optional[Student]:
        # BINARY: exact, case-sensitive match on roll number.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE BINARY s.roll_no=%s AND s.class_id=%s LIMIT 1",
                (roll_no, class_id),
            )
            row = fetchone(cur)
            return _to_student(row) if row else None

    def create_student(self, *, user_id: Optional[int], roll_no: str, class_id: int, address: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(user_id, roll_no, class_id, address, is_active)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (user_id, roll_no, class_id, address),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            logger.warning("student insert rejected by constraint: %s", e)
            if is_duplicate_key(e, "uq_student_roll_class"):
                # Another request inserted the same roll number after our pre-check.
                raise ValidationError("Roll number already exists in this class")
            if is_duplicate_key(e, "uq_student_user"):
                raise ValidationError("Student account is already linked to another student")
            if is_missing_reference(e):
                raise ValidationError("Invalid class ID or user ID")
            raise ValidationError("Student could not be saved")

    def list_by_class(
        self,
        *,
        class_id: int,
        offset: int,
        limit: int,
        search: Optional[str] = None,
    ) -> tuple[Sequence[Student], int]:
        where = " WHERE s.class_id=%s AND s.is_active=1"
        params: list = [class_id]
        if search:
            where += " AND LOWER(u.name) LIKE %s"
            params.append(f"%{search.lower()}%")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + where + " ORDER BY s.roll_no LIMIT %s OFFSET %s", (*params, limit, offset))
            rows = [_to_student(r) for r in fetchall(cur)]
            total = count(
                cur,
                "SELECT COUNT(*) AS n FROM students s LEFT JOIN users u ON u.user_id = s.user_id" + where,
                tuple(params),
            )
            return rows, total

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY s.class_id, s.roll_no")
            return [_to_student(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return count(cur, "SELECT COUNT(*) AS n FROM students")
