"""Maintenance mode schedule: validation, evaluation and backend calls."""
import re
from datetime import datetime, time

from uniform_admin.extensions import db
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.services import backend_client

MAX_MESSAGE_LENGTH = 500
_TIME_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

DEFAULT_SETTINGS = {
    "is_enabled": False,
    "display_message": "",
    "scheduled_date": None,
    "start_time": None,
    "end_time": None,
    "is_all_day": False,
}


def _parse_date(value):
    """Parse YYYY-MM-DD; raises ValueError for any other form."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    return datetime.strptime(value, "%Y-%m-%d").date()


def _parse_time(value, field):
    match = _TIME_RE.fullmatch(value) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"{field} must use HH:MM (24-hour) format.")
    return time(int(match.group(1)), int(match.group(2)))


def normalize_settings(settings):
    """Validate a maintenance schedule and return the normalized copy.

    Raises ValueError on invalid input.
    """
    if not isinstance(settings, dict):
        raise ValueError("Maintenance settings must be an object.")

    result = dict(DEFAULT_SETTINGS)
    result.update({k: v for k, v in settings.items() if k in DEFAULT_SETTINGS})
    result["is_enabled"] = bool(result["is_enabled"])
    result["is_all_day"] = bool(result["is_all_day"])

    message = (result["display_message"] or "").strip()
    if len(message) > MAX_MESSAGE_LENGTH:
        raise ValueError(
            f"Display message must be {MAX_MESSAGE_LENGTH} characters or less"
        )
    result["display_message"] = message

    if result["scheduled_date"]:
        try:
            _parse_date(result["scheduled_date"])
        except (TypeError, ValueError):
            raise ValueError("scheduled_date must use YYYY-MM-DD format.")
    else:
        result["scheduled_date"] = None

    if result["is_all_day"]:
        result["start_time"] = None
        result["end_time"] = None
    else:
        start = result["start_time"] or None
        end = result["end_time"] or None
        if start:
            _parse_time(start, "start_time")
        if end:
            _parse_time(end, "end_time")
        if start and end and _parse_time(end, "end_time") <= _parse_time(start, "start_time"):
            raise ValueError("End time must be after start time")
        result["start_time"] = start
        result["end_time"] = end

    if result["is_enabled"] and result["scheduled_date"] and not result["is_all_day"]:
        if not (result["start_time"] and result["end_time"]):
            raise ValueError("A scheduled window needs both start and end time.")
    return result


def is_window_active(settings, now=None):
    """Whether a (normalized) schedule puts the system in maintenance at ``now``.

    Enabled without a date means maintenance is on right away.
    """
    if not settings or not settings.get("is_enabled"):
        return False
    now = now or datetime.now()
    scheduled = settings.get("scheduled_date")
    if not scheduled:
        return True
    if _parse_date(scheduled) != now.date():
        return False
    if settings.get("is_all_day"):
        return True
    start = settings.get("start_time")
    end = settings.get("end_time")
    if not start or not end:
        return True
    return _parse_time(start, "start_time") <= now.time() < _parse_time(end, "end_time")


def get_settings():
    body = backend_client.get("/system-admin/maintenance")
    data = dict(DEFAULT_SETTINGS)
    data.update(body.get("data") or {})
    return data


def update_settings(settings, admin_id):
    normalized = normalize_settings(settings)
    body = backend_client.put("/system-admin/maintenance", normalized)
    AuditLog.record(
        admin_id,
        "UPDATE_MAINTENANCE",
        target_type="maintenance",
        payload=normalized,
    )
    db.session.commit()
    return body.get("data") or normalized


def public_status():
    """Public check: ``{"isActive": bool, "message": str | None}``."""
    body = backend_client.get("/maintenance/status")
    data = body.get("data") or {}
    return {
        "isActive": bool(data.get("isActive")),
        "message": data.get("message"),
    }
