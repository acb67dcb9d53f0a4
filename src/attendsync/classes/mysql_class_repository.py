from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone, is_duplicate_key, is_missing_reference
from .model import SchoolClass
from .repository import ClassRepository


def _to_class(row: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(row["class_id"]),
        name=row["name"],
        subject=row["subject"],
        section=row.get("section"),
        teacher_id=row.get("teacher_id"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT class_id, name, section, subject, teacher_id FROM classes WHERE class_id=%s",
                (class_id,),
            )
            row = fetchone(cur)
            return _to_class(row) if row else None

    def find_duplicate(self, *, name: str, subject: str, teacher_id: Optional[int]) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, name, section, subject, teacher_id
                FROM classes
                WHERE name=%s AND subject=%s AND teacher_id <=> %s
                LIMIT 1
                """,
                (name, subject, teacher_id),
            )
            row = fetchone(cur)
            return _to_class(row) if row else None

    def create_class(self, *, name: str, section: Optional[str], subject: str, teacher_id: Optional[int]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO classes(name, section, subject, teacher_id) VALUES(%s,%s,%s,%s)",
                    (name, section, subject, teacher_id),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e, "uq_class_name_subject_teacher"):
                raise ValidationError("Class already exists")
            if is_missing_reference(e):
                raise ValidationError("Teacher does not exist")
            raise ValidationError("Class could not be saved")

    def list_all(self, *, teacher_id: Optional[int] = None) -> Sequence[SchoolClass]:
        sql = "SELECT class_id, name, section, subject, teacher_id FROM classes"
        params: tuple = ()
        if teacher_id is not None:
            sql += " WHERE teacher_id=%s"
            params = (teacher_id,)
        sql += " ORDER BY name, section"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_class(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return count(cur, "SELECT COUNT(*) AS n FROM classes")
