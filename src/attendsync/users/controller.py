from __future__ import annotations

from flask import Flask, request, session

from ..common.guards import current_role, current_user_id, login_required, ok, require_admin, require_role
from ..container import Container
from ..core.enums import Role
from ..permissions.hierarchy import get_available_roles, role_display_name


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = request.get_json(silent=True) or {}
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

        return ok(
            {"user_id": s_user.user_id, "name": s_user.name, "email": s_user.email, "role": s_user.role.value},
            "Login successful",
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/auth/me", endpoint="me")
    @login_required
    def me():
        role = current_role()
        return ok(
            {
                "user_id": session.get("user_id"),
                "name": session.get("name"),
                "role": role.value if role else None,
                "role_name": role_display_name(role),
            }
        )

    @app.route("/api/auth/change-password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        body = request.get_json(silent=True) or {}
        container.auth_service.change_password(
            user_id=current_user_id(),
            old_password=body.get("old_password", ""),
            new_password=body.get("new_password", ""),
        )
        return ok({}, "Password changed successfully")

    @app.route("/api/teachers/me", methods=["GET"], endpoint="teacher_profile")
    @require_role(Role.TEACHER)
    def teacher_profile():
        return ok(container.user_service.profile(user_id=current_user_id()), "Teacher profile fetched successfully")

    @app.route("/api/teachers/me", methods=["PUT"], endpoint="update_teacher_profile")
    @require_role(Role.TEACHER)
    def update_teacher_profile():
        body = request.get_json(silent=True) or {}
        data = container.user_service.update_profile(
            user_id=current_user_id(), name=body.get("name"), phone=body.get("phone")
        )
        session["name"] = data["name"]
        return ok(data, "Teacher profile updated successfully")

    @app.route("/api/admin/users", methods=["GET"], endpoint="admin_users")
    @require_admin
    def admin_users():
        return ok(container.user_service.list_users(current_role=current_role()))

    @app.route("/api/admin/users", methods=["POST"], endpoint="add_user")
    @require_admin
    def add_user():
        body = request.get_json(silent=True) or {}
        user_id = container.user_service.create_user(
            current_role=current_role(),
            name=body.get("name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
            role=body.get("role"),
            phone=body.get("phone"),
        )
        return ok({"user_id": user_id}, "User created successfully", 201)

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @require_admin
    def delete_user(user_id: int):
        container.user_service.delete_user(current_role=current_role(), user_id=user_id)
        return ok({}, "User deleted successfully")

    @app.route("/api/admin/roles", endpoint="available_roles")
    @login_required
    def available_roles():
        roles = sorted(get_available_roles(current_role()), key=lambda r: r.value)
        return ok([{"role": r.value, "name": role_display_name(r)} for r in roles])

    @app.route("/api/admin/stats", endpoint="system_stats")
    @require_admin
    def system_stats():
        return ok(container.user_service.system_stats(current_role=current_role()))
