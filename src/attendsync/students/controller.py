from __future__ import annotations

from flask import Flask, request

from ..common.guards import current_role, current_user_id, ok, require_role, require_teacher
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a number")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @require_teacher
    def add_student():
        body = request.get_json(silent=True) or {}
        student_id = container.student_service.add_student(
            current_role=current_role(),
            actor_id=current_user_id(),
            roll_no=body.get("roll_no"),
            class_id=body.get("class_id"),
            user_id=body.get("user_id"),
            address=body.get("address"),
            date_of_birth=body.get("date_of_birth"),
            gender=body.get("gender"),
        )
        return ok({"student_id": student_id}, "Student added successfully", 201)

    @app.route("/api/students/class/<class_id>", endpoint="students_by_class")
    @require_teacher
    def students_by_class(class_id: str):
        data = container.student_service.list_by_class(
            current_role=current_role(),
            user_id=current_user_id(),
            class_id=class_id,
            page=_int_arg("page", 1),
            limit=_int_arg("limit", DEFAULT_PAGE_SIZE),
            search=request.args.get("search"),
        )
        return ok(data, "Students fetched successfully")

    @app.route("/api/students/<int:student_id>", endpoint="student_detail")
    @require_teacher
    def student_detail(student_id: int):
        data = container.student_service.get_by_id(
            current_role=current_role(), user_id=current_user_id(), student_id=student_id
        )
        return ok(data, "Student profile fetched successfully")

    # Self-service views for a logged-in student.
    @app.route("/api/students/me", endpoint="student_me")
    @require_role(Role.STUDENT)
    def student_me():
        return ok(container.student_service.profile(user_id=current_user_id()), "Student profile fetched successfully")

    @app.route("/api/students/me/attendance", endpoint="student_me_attendance")
    @require_role(Role.STUDENT)
    def student_me_attendance():
        data = container.attendance_service.student_attendance(
            user_id=current_user_id(),
            start_date=request.args.get("start"),
            end_date=request.args.get("end"),
            page=_int_arg("page", 1),
            limit=_int_arg("limit", DEFAULT_PAGE_SIZE),
        )
        return ok(data, "Student attendance fetched successfully")
