from __future__ import annotations

from flask import Flask, request

from ..common.guards import current_role, current_user_id, ok, require_teacher
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["POST"], endpoint="create_class")
    @require_teacher
    def create_class():
        body = request.get_json(silent=True) or {}
        class_id = container.class_service.create_class(
            current_role=current_role(),
            teacher_id=body.get("teacher_id"),
            name=body.get("name", ""),
            subject=body.get("subject", ""),
            section=body.get("section"),
        )
        return ok({"class_id": class_id}, "Class created successfully", 201)

    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    @require_teacher
    def list_classes():
        return ok(container.class_service.list_classes(current_role=current_role(), user_id=current_user_id()))
