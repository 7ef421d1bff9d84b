"""Unauthenticated endpoints used before an admin signs in."""
import logging

from uniform_admin.blueprints.public import public_bp
from uniform_admin.services import maintenance_service
from uniform_admin.services.backend_client import BackendError

logger = logging.getLogger(__name__)


@public_bp.route("/maintenance/status")
def maintenance_status():
    """Whether maintenance mode is active right now."""
    try:
        status = maintenance_service.public_status()
    except BackendError:
        logger.exception("Maintenance status check failed")
        return {"success": False, "message": "Status unavailable"}, 503
    return {"success": True, "data": status}
