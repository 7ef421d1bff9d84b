"""Audit trail: backend transactions plus the console's own action log."""
import logging
from datetime import datetime

from uniform_admin.extensions import db
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.services import backend_client

logger = logging.getLogger(__name__)

TRANSACTION_FILTERS = ("type", "action", "userId", "userRole")


def _parse_timestamp(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable transaction timestamp %r", value)
        return None


def format_timestamp(value):
    """``Oct 16, 3:05 PM`` style; empty string when unparseable."""
    dt = _parse_timestamp(value)
    if dt is None:
        return ""
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day}, {hour}:{dt:%M} {dt:%p}"


def format_transaction(tx):
    return {
        "id": tx.get("id"),
        "dateTime": format_timestamp(tx.get("created_at")),
        "user": tx.get("user_name") or "System",
        "action": tx.get("action") or "Unknown Action",
        "details": tx.get("details") or "No details available",
        "type": tx.get("type") or "Unknown",
    }


def list_transactions(start_date=None, end_date=None, limit=50, offset=0, **filters):
    """Backend transactions filtered and formatted for the audit screen.

    ``start_date``/``end_date`` are datetimes (sent as ISO 8601).
    """
    params = {k: filters.get(k) for k in TRANSACTION_FILTERS if filters.get(k)}
    if start_date:
        params["startDate"] = start_date.isoformat()
    if end_date:
        params["endDate"] = end_date.isoformat()
    if limit:
        params["limit"] = limit
    if offset:
        params["offset"] = offset
    body = backend_client.get("/transactions", params=params)
    return {
        "audits": [format_transaction(tx) for tx in body.get("data") or []],
        "pagination": body.get("pagination"),
    }


def list_console_actions(action=None, admin_id=None, page=1, per_page=50):
    """Local audit log, newest first."""
    query = AuditLog.query
    if action:
        query = query.filter_by(action=action)
    if admin_id:
        query = query.filter_by(admin_id=str(admin_id))
    query = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_stats():
    """Console action counts by type for the ``stats`` command."""
    rows = (
        db.session.query(AuditLog.action, db.func.count(AuditLog.id))
        .group_by(AuditLog.action)
        .all()
    )
    return dict(rows)
