"""RQ worker job: record how many pending pre-orders a new item can fill."""
import logging
from flask import current_app, has_app_context

from uniform_admin import create_app, extensions
from uniform_admin.extensions import db
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.services import pre_order_service

logger = logging.getLogger(__name__)

_app = None


def _job_app():
    """The running app when called in-process, else one app per worker process."""
    global _app
    if has_app_context():
        return current_app._get_current_object()
    if _app is None:
        _app = create_app()
    return _app


def record_pre_order_matches(item_id, name, education_level, size, admin_id):
    """Count pending pre-orders matching a new item and audit the result.

    Enqueued by item_service.create_item when the item is created with stock.

    Idempotency: skips items that already have a PRE_ORDER_MATCH entry.
    Distributed lock: prevents duplicate work on the same item.
    """
    app = _job_app()
    with app.app_context():
        existing = AuditLog.query.filter_by(
            action="PRE_ORDER_MATCH", target_id=str(item_id)
        ).first()
        if existing:
            logger.info("Pre-orders already recorded for item %s, skipping", item_id)
            return existing.payload.get("count") if existing.payload else None

        lock = None
        if extensions.redis_client is not None:
            lock = extensions.redis_client.lock(f"pre_orders:{item_id}", timeout=300)
            if not lock.acquire(blocking=False):
                logger.info("Lock held for item %s, skipping", item_id)
                return None

        try:
            count = pre_order_service.count_matching_pre_orders(
                name, education_level, size
            )
            AuditLog.record(
                admin_id,
                "PRE_ORDER_MATCH",
                target_type="item",
                target_id=item_id,
                payload={"count": count, "name": name, "size": size},
            )
            db.session.commit()
            logger.info("Item %s matches %d pending pre-orders", item_id, count)
            return count
        except Exception:
            logger.exception("Pre-order check failed for item %s", item_id)
            db.session.rollback()
            raise  # let RQ handle retry
        finally:
            if lock is not None:
                try:
                    lock.release()
                except Exception:
                    logger.warning("Lock for item %s expired before release", item_id)
