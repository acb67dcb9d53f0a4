from __future__ import annotations

from flask import Flask

from ..common.guards import current_role, login_required, ok
from ..container import Container
from .menu import get_menu_items_for_role
from .policies import FEATURE_PERMISSIONS, NAVIGATION_PERMISSIONS, can_access_feature, has_permission


def register(app: Flask, container: Container) -> None:
    @app.route("/api/navigation/menu", endpoint="navigation_menu")
    @login_required
    def navigation_menu():
        return ok([item.to_dict() for item in get_menu_items_for_role(current_role())])

    @app.route("/api/navigation/permissions", endpoint="navigation_permissions")
    @login_required
    def navigation_permissions():
        role = current_role()
        return ok(
            {
                "navigation": {key: has_permission(role, key) for key in NAVIGATION_PERMISSIONS},
                "features": {key: can_access_feature(role, key) for key in FEATURE_PERMISSIONS},
            }
        )
