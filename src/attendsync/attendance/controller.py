from __future__ import annotations

from flask import Flask, request

from ..common.guards import current_role, current_user_id, ok, require_role, require_teacher
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @require_role(Role.TEACHER)
    def mark_attendance():
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.mark(
            current_role=current_role(),
            teacher_id=current_user_id(),
            student_id=body.get("student_id"),
            class_id=body.get("class_id"),
            attendance_date=body.get("date"),
            status=body.get("status"),
        )
        return ok(record.to_dict(), "Attendance marked successfully", 201)

    @app.route("/api/attendance/toggle", methods=["POST"], endpoint="toggle_attendance")
    @require_role(Role.TEACHER)
    def toggle_attendance():
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.toggle(
            current_role=current_role(),
            teacher_id=current_user_id(),
            student_id=body.get("student_id"),
            class_id=body.get("class_id"),
            attendance_date=body.get("date"),
        )
        return ok(record.to_dict(), "Attendance marked successfully", 201)

    @app.route("/api/attendance/students/<int:student_id>/summary", endpoint="student_attendance_summary")
    @require_teacher
    def student_attendance_summary(student_id: int):
        return ok(container.attendance_service.student_summary(student_id))

    @app.route("/api/attendance/low", endpoint="low_attendance")
    @require_teacher
    def low_attendance():
        threshold = request.args.get("threshold")
        try:
            threshold_v = float(threshold) if threshold else None
        except ValueError:
            raise ValidationError("threshold must be a number")
        return ok(container.attendance_service.low_attendance_students(current_role=current_role(), threshold=threshold_v))

    @app.route("/api/attendance/classes/<class_id>/monthly", endpoint="monthly_class_summary")
    @require_teacher
    def monthly_class_summary(class_id: str):
        try:
            month = int(request.args.get("month", ""))
            year = int(request.args.get("year", ""))
        except ValueError:
            raise ValidationError("Class ID, month and year are required")
        return ok(
            container.attendance_service.monthly_class_summary(
                current_role=current_role(), class_id=class_id, month=month, year=year
            )
        )

    @app.route("/api/attendance/sync", methods=["POST"], endpoint="sync_attendance")
    @require_role(Role.TEACHER)
    def sync_attendance():
        body = request.get_json(silent=True) or {}
        synced = container.attendance_service.sync(
            current_role=current_role(),
            teacher_id=current_user_id(),
            records=body.get("records"),
        )
        return ok({"synced": synced}, "Attendance synced successfully", 201)

    @app.route("/api/attendance/classes/<class_id>", endpoint="class_attendance")
    @require_teacher
    def class_attendance(class_id: str):
        return ok(
            container.attendance_service.class_attendance(
                current_role=current_role(), user_id=current_user_id(), class_id=class_id
            ),
            "Class attendance fetched successfully",
        )

    @app.route("/api/attendance/classes/<class_id>/day", endpoint="class_attendance_by_date")
    @require_teacher
    def class_attendance_by_date(class_id: str):
        return ok(
            container.attendance_service.list_by_class_and_date(
                current_role=current_role(),
                user_id=current_user_id(),
                class_id=class_id,
                attendance_date=request.args.get("date"),
            ),
            "Attendance fetched successfully",
        )

    @app.route("/api/attendance/classes/<class_id>/report", endpoint="class_attendance_report")
    @require_teacher
    def class_attendance_report(class_id: str):
        return ok(
            container.attendance_service.class_report(
                current_role=current_role(),
                user_id=current_user_id(),
                class_id=class_id,
                start_date=request.args.get("start"),
                end_date=request.args.get("end"),
            ),
            "Attendance report fetched successfully",
        )
