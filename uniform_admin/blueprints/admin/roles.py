"""Roles and permissions."""
from flask import g

from uniform_admin.blueprints.admin import admin_bp, json_body
from uniform_admin.services import role_service


@admin_bp.route("/roles", methods=["GET"])
def list_roles():
    return {"success": True, "data": role_service.list_roles()}


@admin_bp.route("/roles/permissions", methods=["GET"])
def list_permissions():
    return {"success": True, "data": role_service.list_permissions()}


@admin_bp.route("/roles/<role>", methods=["GET"])
def get_role(role):
    details = role_service.get_role(role)
    if details is None:
        return {"success": False, "message": f"Role {role} not found"}, 404
    return {"success": True, "data": details}


@admin_bp.route("/roles/<role>/permissions", methods=["GET"])
def get_role_permissions(role):
    return {"success": True, "data": role_service.get_role_permissions(role)}


@admin_bp.route("/roles/<role>/permissions", methods=["POST"])
def assign_permission(role):
    result = role_service.assign_permission(
        role, json_body().get("permissionId"), g.admin_id
    )
    return {"success": True, "data": result}, 201


@admin_bp.route("/roles/<role>/permissions/<permission_id>", methods=["DELETE"])
def remove_permission(role, permission_id):
    result = role_service.remove_permission(role, permission_id, g.admin_id)
    return {"success": True, "data": result}


@admin_bp.route("/roles/<role>/status", methods=["PUT"])
def set_role_status(role):
    result = role_service.set_role_status(
        role, json_body().get("isActive"), g.admin_id
    )
    return {"success": True, "data": result}
