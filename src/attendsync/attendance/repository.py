from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, *, student_id: int, class_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        student_id: int,
        class_id: int,
        teacher_id: int,
        attendance_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Create the mark, or overwrite status/teacher of the existing one."""

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

    def list_for_class(
        self,
        *,
        class_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records of a class, optionally limited to an inclusive date range."""

        raise NotImplementedError

    def list_for_class_and_date(self, *, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def counts_by_student(self) -> dict[int, tuple[int, int]]:
        """``{student_id: (present, total)}`` for every student with at least one record."""

        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
