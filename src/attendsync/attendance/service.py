from __future__ import annotations

import logging
import math
from typing import Optional

from ..classes.repository import ClassRepository
from ..common.datetime_utils import month_bounds, parse_iso_date
from ..common.validators import is_blank
from ..core.constants import DEFAULT_PAGE_SIZE, LOW_ATTENDANCE_THRESHOLD
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions.hierarchy import coerce_role
from ..permissions.policies import can_access_feature
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .stats import attendance_percentage, summarize

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
        *,
        low_threshold: int = LOW_ATTENDANCE_THRESHOLD,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._low_threshold = int(low_threshold)

    @staticmethod
    def _require_marker(current_role: Role) -> None:
        if not can_access_feature(current_role, "markAttendance"):
            raise AuthorizationError("Only teachers can mark attendance")

    @staticmethod
    def _require_reader(current_role: Role) -> None:
        if not can_access_feature(current_role, "viewAttendanceReports"):
            raise AuthorizationError("You are not allowed to view attendance reports")

    def _require_class(self, current_role: Role, user_id, class_id):
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        if coerce_role(current_role) == Role.TEACHER and school_class.teacher_id != user_id:
            raise AuthorizationError("You are not authorized to view this class")
        return school_class

    def _check_target(self, student_id, class_id, attendance_date):
        if is_blank(student_id) or is_blank(class_id) or is_blank(attendance_date):
            raise ValidationError("Student ID, class ID and date are required")

        day = parse_iso_date(attendance_date)
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        if not self._classes.get_by_id(class_id):
            raise NotFoundError("Class not found")
        if str(student.class_id) != str(class_id):
            raise ValidationError("Student is not enrolled in this class")
        return day

    @staticmethod
    def _parse_status(status) -> AttendanceStatus:
        if is_blank(status):
            raise ValidationError("Student ID, class ID, date and status are required")
        try:
            return AttendanceStatus(status)
        except ValueError:
            raise ValidationError("Status must be PRESENT or ABSENT")

    def mark(
        self,
        *,
        current_role: Role,
        teacher_id: int,
        student_id,
        class_id,
        attendance_date: str,
        status,
    ) -> AttendanceRecord:
        self._require_marker(current_role)
        status = self._parse_status(status)

        day = self._check_target(student_id, class_id, attendance_date)
        record = self._attendance.upsert(
            student_id=student_id,
            class_id=class_id,
            teacher_id=teacher_id,
            attendance_date=day,
            status=status,
        )
        logger.info("attendance marked student_id=%s class_id=%s date=%s status=%s", student_id, class_id, day, status.value)
        return record

    def toggle(self, *, current_role: Role, teacher_id: int, student_id, class_id, attendance_date: str) -> AttendanceRecord:
        self._require_marker(current_role)
        day = self._check_target(student_id, class_id, attendance_date)

        existing = self._attendance.get(student_id=student_id, class_id=class_id, attendance_date=day)
        if existing and existing.status == AttendanceStatus.PRESENT:
            status = AttendanceStatus.ABSENT
        else:
            status = AttendanceStatus.PRESENT

        return self._attendance.upsert(
            student_id=student_id,
            class_id=class_id,
            teacher_id=teacher_id,
            attendance_date=day,
            status=status,
        )

    def sync(self, *, current_role: Role, teacher_id: int, records) -> int:
        """Upload marks taken offline. Every record is checked before anything is written."""
        self._require_marker(current_role)
        if not isinstance(records, list) or not records:
            raise ValidationError("Attendance records are required")

        pending = []
        for i, raw in enumerate(records):
            if not isinstance(raw, dict):
                raise ValidationError(f"Record {i + 1} is not an object")
            try:
                status = self._parse_status(raw.get("status"))
                day = self._check_target(raw.get("student_id"), raw.get("class_id"), raw.get("date"))
            except ValidationError as e:
                raise ValidationError(f"Record {i + 1}: {e.message}")
            pending.append((raw["student_id"], raw["class_id"], day, status))

        for student_id, class_id, day, status in pending:
            self._attendance.upsert(
                student_id=student_id,
                class_id=class_id,
                teacher_id=teacher_id,
                attendance_date=day,
                status=status,
            )
        logger.info("attendance synced teacher_id=%s records=%s", teacher_id, len(pending))
        return len(pending)

    def list_by_class_and_date(self, *, current_role: Role, user_id: int, class_id, attendance_date) -> list[dict]:
        self._require_reader(current_role)
        if is_blank(class_id) or is_blank(attendance_date):
            raise ValidationError("Class ID and date are required")

        day = parse_iso_date(attendance_date)
        self._require_class(current_role, user_id, class_id)
        return [r.to_dict() for r in self._attendance.list_for_class_and_date(class_id=class_id, attendance_date=day)]

    def class_attendance(self, *, current_role: Role, user_id: int, class_id) -> dict:
        """Every mark of a class, newest first, with class-wide averages."""
        self._require_reader(current_role)
        school_class = self._require_class(current_role, user_id, class_id)

        records = sorted(
            self._attendance.list_for_class(class_id=class_id),
            key=lambda r: r.attendance_date,
            reverse=True,
        )
        _, total_students = self._students.list_by_class(class_id=class_id, offset=0, limit=1)
        total_days = len({r.attendance_date for r in records})
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        possible = total_students * total_days

        return {
            "class": school_class.to_dict(),
            "attendance": [r.to_dict() for r in records],
            "stats": {
                "total_students": total_students,
                "total_classes": total_days,
                "average_attendance": attendance_percentage(present, possible),
            },
        }

    def class_report(self, *, current_role: Role, user_id: int, class_id, start_date, end_date) -> dict:
        self._require_reader(current_role)
        if is_blank(class_id) or is_blank(start_date) or is_blank(end_date):
            raise ValidationError("Class ID, start date and end date are required")

        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
        if start > end:
            raise ValidationError("Start date must not be after end date")
        self._require_class(current_role, user_id, class_id)

        records = self._attendance.list_for_class(class_id=class_id, start_date=start, end_date=end)
        return {
            "class_id": class_id,
            "from": start.isoformat(),
            "to": end.isoformat(),
            "records": [r.to_dict() for r in records],
        }

    def student_summary(self, student_id) -> dict:
        return {"student_id": student_id, **summarize(self._attendance.list_for_student(student_id))}

    def student_attendance(
        self,
        *,
        user_id: int,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict:
        """The logged-in student's own marks (newest first) and totals."""
        student = self._students.get_by_user_id(user_id)
        if not student:
            raise NotFoundError("Student profile not found")

        records = list(self._attendance.list_for_student(student.student_id))
        # The range applies only when both ends are given.
        if start_date and end_date:
            start = parse_iso_date(start_date)
            end = parse_iso_date(end_date)
            records = [r for r in records if start <= r.attendance_date <= end]

        page = max(int(page), 1)
        limit = max(int(limit), 1)
        offset = (page - 1) * limit
        return {
            "attendance": [r.to_dict() for r in records[offset:offset + limit]],
            "statistics": summarize(records),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": len(records),
                "pages": math.ceil(len(records) / limit),
            },
        }

    def low_attendance_students(self, *, current_role: Role, threshold: Optional[float] = None) -> list[dict]:
        self._require_reader(current_role)

        limit = self._low_threshold if threshold is None else float(threshold)
        counts = self._attendance.counts_by_student()
        out: list[dict] = []
        for student in self._students.list_all():
            present, total = counts.get(student.student_id, (0, 0))
            percentage = attendance_percentage(present, total)
            if percentage < limit:
                out.append(
                    {
                        "student_id": student.student_id,
                        "name": student.name or "Unknown",
                        "roll_no": student.roll_no,
                        "class_id": student.class_id,
                        "attendance_percentage": percentage,
                    }
                )
        return out

    def monthly_class_summary(self, *, current_role: Role, class_id, month: int, year: int) -> dict:
        self._require_reader(current_role)
        if is_blank(class_id):
            raise ValidationError("Class ID, month and year are required")

        start, end = month_bounds(year, month)
        per_student: dict[int, dict] = {}
        for r in self._attendance.list_for_class(class_id=class_id, start_date=start, end_date=end):
            s = per_student.setdefault(r.student_id, {"student_id": r.student_id, "present": 0, "absent": 0})
            if r.status == AttendanceStatus.PRESENT:
                s["present"] += 1
            else:
                s["absent"] += 1

        return {"class_id": class_id, "month": int(month), "year": int(year), "summary": list(per_student.values())}
