"""Audit trail views."""
from datetime import datetime
from flask import request

from uniform_admin.blueprints.admin import admin_bp
from uniform_admin.services import audit_service


def _date_arg(name):
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"{name} must be an ISO 8601 date")


@admin_bp.route("/audits", methods=["GET"])
def list_audits():
    """Backend transactions, formatted for the recent audits table."""
    result = audit_service.list_transactions(
        start_date=_date_arg("startDate"),
        end_date=_date_arg("endDate"),
        limit=min(request.args.get("limit", 50, type=int), 500),
        offset=request.args.get("offset", 0, type=int),
        **{k: request.args.get(k) for k in audit_service.TRANSACTION_FILTERS},
    )
    return {"success": True, "data": result["audits"], "pagination": result["pagination"]}


@admin_bp.route("/audits/console", methods=["GET"])
def list_console_actions():
    """Actions taken through this console (local log)."""
    pagination = audit_service.list_console_actions(
        action=request.args.get("action"),
        admin_id=request.args.get("adminId"),
        page=request.args.get("page", 1, type=int),
        per_page=min(request.args.get("limit", 50, type=int), 200),
    )
    return {
        "success": True,
        "data": [entry.to_dict() for entry in pagination.items],
        "pagination": {
            "page": pagination.page,
            "limit": pagination.per_page,
            "total": pagination.total,
        },
    }
