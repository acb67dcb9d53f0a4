from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = "SELECT attendance_id, student_id, class_id, teacher_id, attendance_date, status FROM attendance"


def _to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(row["attendance_id"]),
        student_id=int(row["student_id"]),
        class_id=int(row["class_id"]),
        teacher_id=int(row["teacher_id"]),
        attendance_date=row["attendance_date"],
        status=AttendanceStatus(row["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, student_id: int, class_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE student_id=%s AND class_id=%s AND attendance_date=%s",
                (student_id, class_id, attendance_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def upsert(
        self,
        *,
        student_id: int,
        class_id: int,
        teacher_id: int,
        attendance_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, class_id, teacher_id, attendance_date, status)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), teacher_id=VALUES(teacher_id)
                """,
                (student_id, class_id, teacher_id, attendance_date, status.value),
            )
            cur.execute(
                _SELECT + " WHERE student_id=%s AND class_id=%s AND attendance_date=%s",
                (student_id, class_id, attendance_date),
            )
            return _to_record(fetchone(cur))

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE student_id=%s ORDER BY attendance_date DESC", (student_id,))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_class(
        self,
        *,
        class_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        sql = _SELECT + " WHERE class_id=%s"
        params: list = [class_id]
        if start_date is not None:
            sql += " AND attendance_date >= %s"
            params.append(start_date)
        if end_date is not None:
            sql += " AND attendance_date <= %s"
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY attendance_date, student_id", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_class_and_date(self, *, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE class_id=%s AND attendance_date=%s ORDER BY student_id",
                (class_id, attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def counts_by_student(self) -> dict[int, tuple[int, int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, SUM(status='PRESENT') AS present, COUNT(*) AS total
                FROM attendance
                GROUP BY student_id
                """
            )
            return {int(r["student_id"]): (int(r["present"] or 0), int(r["total"])) for r in fetchall(cur)}

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return count(cur, "SELECT COUNT(*) AS n FROM attendance")
