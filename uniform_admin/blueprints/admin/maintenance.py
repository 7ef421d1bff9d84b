"""Maintenance mode scheduling."""
from flask import g

from uniform_admin.blueprints.admin import admin_bp, json_body
from uniform_admin.services import maintenance_service


@admin_bp.route("/maintenance", methods=["GET"])
def get_maintenance():
    settings = maintenance_service.get_settings()
    return {
        "success": True,
        "data": settings,
        "scheduledActive": maintenance_service.is_window_active(settings),
    }


@admin_bp.route("/maintenance", methods=["PUT"])
def update_maintenance():
    settings = maintenance_service.update_settings(json_body(), g.admin_id)
    return {"success": True, "data": settings}
