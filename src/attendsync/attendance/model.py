from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's mark for one class on one day."""

    attendance_id: int
    student_id: int
    class_id: int
    teacher_id: int
    attendance_date: date
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "student_id": self.student_id,
            "class_id": self.class_id,
            "teacher_id": self.teacher_id,
            "date": self.attendance_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
        }
