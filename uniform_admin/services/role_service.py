"""Roles and permissions, backed by ``/system-admin/roles``."""
from urllib.parse import quote

from uniform_admin.extensions import db
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.services import backend_client
from uniform_admin.services.backend_client import BackendError


def _role_path(role, *rest):
    parts = [quote(str(role), safe="")] + [quote(str(p), safe="") for p in rest]
    return "/system-admin/roles/" + "/".join(parts)


def list_roles():
    return backend_client.get("/system-admin/roles").get("data") or []


def list_permissions():
    return backend_client.get("/system-admin/roles/permissions").get("data") or []


def get_role(role):
    try:
        body = backend_client.get(_role_path(role))
    except BackendError as e:
        if e.status_code == 404:
            return None
        raise
    return body.get("data")


def get_role_permissions(role):
    return backend_client.get(_role_path(role, "permissions")).get("data") or []


def assign_permission(role, permission_id, admin_id):
    if not permission_id:
        raise ValueError("permissionId is required")
    body = backend_client.post(
        _role_path(role, "permissions"), {"permissionId": permission_id}
    )
    AuditLog.record(
        admin_id,
        "ASSIGN_PERMISSION",
        target_type="role",
        target_id=role,
        payload={"permissionId": permission_id},
    )
    db.session.commit()
    return body.get("data")


def remove_permission(role, permission_id, admin_id):
    body = backend_client.delete(_role_path(role, "permissions", permission_id))
    AuditLog.record(
        admin_id,
        "REMOVE_PERMISSION",
        target_type="role",
        target_id=role,
        payload={"permissionId": permission_id},
    )
    db.session.commit()
    return body.get("data")


def set_role_status(role, is_active, admin_id):
    if not isinstance(is_active, bool):
        raise ValueError("isActive must be true or false")
    body = backend_client.put(_role_path(role, "status"), {"isActive": is_active})
    AuditLog.record(
        admin_id,
        "SET_ROLE_STATUS",
        target_type="role",
        target_id=role,
        payload={"isActive": is_active},
    )
    db.session.commit()
    return body.get("data")
