import hmac
import logging
from flask import Blueprint, current_app, g, request

from uniform_admin.services.backend_client import BackendError

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__)


@admin_bp.before_request
def require_admin():
    """Admin API guard.

    - X-Admin-Token header must match ADMIN_API_TOKEN (when configured)
    - X-Admin-Id names the acting admin for the audit log
    """
    expected = current_app.config.get("ADMIN_API_TOKEN", "")
    token = request.headers.get("X-Admin-Token", "")
    if expected and not hmac.compare_digest(token, expected):
        logger.warning("Rejected admin request to %s: bad token", request.path)
        return {"success": False, "message": "Forbidden"}, 403
    g.admin_id = request.headers.get("X-Admin-Id", "").strip() or "console"


@admin_bp.errorhandler(BackendError)
def handle_backend_error(e):
    return {"success": False, "message": e.message}, e.status_code


@admin_bp.errorhandler(ValueError)
def handle_validation_error(e):
    body = {"success": False, "message": str(e)}
    if getattr(e, "errors", None):
        body["errors"] = e.errors
    return body, 400


def json_body():
    """Request JSON as a dict (empty when missing or not an object)."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


from uniform_admin.blueprints.admin import (  # noqa: F401, E402
    items,
    item_editor,
    users,
    roles,
    maintenance,
    audits,
)
