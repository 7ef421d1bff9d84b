"""Staff users and students, backed by the ``/users`` endpoints."""
import re

from uniform_admin.extensions import db
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.services import backend_client
from uniform_admin.services.backend_client import BackendError

STUDENT_ROLE = "student"
STUDENT_NUMBER_RE = re.compile(r"^\d{2}-\d{5}[A-Za-z]{3}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

USER_FILTERS = (
    "search",
    "role",
    "status",
    "education_level",
    "course_year_level",
    "school_year",
    "excludeRole",
)
BULK_FIELDS = {"total_item_limit", "order_lockout_period"}


def list_users(page=1, limit=10, **filters):
    """Page of users. ``education_level``/``course_year_level`` are sent even
    when empty so the backend knows the filter was cleared."""
    params = {"page": page, "limit": limit}
    for key in USER_FILTERS:
        value = filters.get(key)
        if key in ("education_level", "course_year_level"):
            params[key] = value
        elif value:
            params[key] = value
    body = backend_client.get("/users", params=params)
    return {"users": body.get("data") or [], "pagination": body.get("pagination")}


def get_user(user_id):
    try:
        body = backend_client.get(f"/users/{user_id}")
    except BackendError as e:
        if e.status_code == 404:
            return None
        raise
    return body.get("data")


def _validate_user(data, require_all=True):
    errors = {}
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip()
    if require_all or "name" in data:
        if not name:
            errors["name"] = "Name is required"
    if require_all or "email" in data:
        if not _EMAIL_RE.match(email):
            errors["email"] = "A valid email is required"
    if require_all and not data.get("role"):
        errors["role"] = "Role is required"
    if errors:
        raise ValueError("; ".join(f"{k}: {v}" for k, v in errors.items()))


def create_user(data, admin_id):
    _validate_user(data)
    body = backend_client.post("/users", data)
    user = body.get("data") or {}
    AuditLog.record(
        admin_id,
        "CREATE_USER",
        target_type="user",
        target_id=user.get("id"),
        payload={"email": data.get("email"), "role": data.get("role")},
    )
    db.session.commit()
    return user


def update_user(user_id, updates, admin_id, action="UPDATE_USER"):
    _validate_user(updates, require_all=False)
    body = backend_client.put(f"/users/{user_id}", updates)
    AuditLog.record(
        admin_id,
        action,
        target_type="student" if action == "UPDATE_STUDENT" else "user",
        target_id=user_id,
        payload={"fields": sorted(updates)},
    )
    db.session.commit()
    return body.get("data") or {}


def disable_user(user_id, admin_id):
    """Disable (soft-delete) a user. Returns False if unknown."""
    try:
        backend_client.delete(f"/users/{user_id}")
    except BackendError as e:
        if e.status_code == 404:
            return False
        raise
    AuditLog.record(admin_id, "DISABLE_USER", target_type="user", target_id=user_id)
    db.session.commit()
    return True


def bulk_update_users(user_ids, update_data, admin_id):
    """Apply order limits to many students at once."""
    if not user_ids:
        raise ValueError("No users selected")
    unknown = set(update_data or {}) - BULK_FIELDS
    if unknown or not update_data:
        raise ValueError(
            f"Bulk update supports only: {', '.join(sorted(BULK_FIELDS))}"
        )
    body = backend_client.patch(
        "/users/bulk-update", {"userIds": list(user_ids), "updateData": update_data}
    )
    AuditLog.record(
        admin_id,
        "BULK_UPDATE_USERS",
        target_type="user",
        payload={"userIds": list(user_ids), "updateData": update_data},
    )
    db.session.commit()
    return body.get("data") or {}


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------

def normalize_student_number(value):
    """Trim and uppercase the initials suffix. Raises ValueError if invalid.

    Format ``YY-NNNNNIII``: school year, enrollment number, initials.
    """
    candidate = (value or "").strip()
    if not STUDENT_NUMBER_RE.match(candidate):
        raise ValueError("Student number must use the format YY-NNNNNIII (e.g. 22-00023RSR)")
    return candidate[:-3] + candidate[-3:].upper()


def suggested_initials(full_name):
    """Initials suffix for a student number: first, middle and last name."""
    parts = (full_name or "").split()
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0][0].upper()
    if len(parts) == 2:
        return (parts[0][0] + parts[1][0] * 2).upper()
    return (parts[0][0] + parts[1][0] + parts[-1][0]).upper()


def list_students(page=1, limit=10, **filters):
    filters["role"] = STUDENT_ROLE
    filters.pop("excludeRole", None)
    return list_users(page=page, limit=limit, **filters)


def create_student(data, admin_id):
    data = dict(data)
    data["role"] = STUDENT_ROLE
    data["student_number"] = normalize_student_number(data.get("student_number"))
    _validate_user(data)
    body = backend_client.post("/users", data)
    student = body.get("data") or {}
    AuditLog.record(
        admin_id,
        "CREATE_STUDENT",
        target_type="student",
        target_id=student.get("id"),
        payload={"student_number": data["student_number"]},
    )
    db.session.commit()
    return student


def update_student(student_id, updates, admin_id):
    updates = dict(updates)
    if "student_number" in updates:
        updates["student_number"] = normalize_student_number(updates["student_number"])
    updates.pop("role", None)
    return update_user(student_id, updates, admin_id, action="UPDATE_STUDENT")
