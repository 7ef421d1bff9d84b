import logging
from rq import Retry

from uniform_admin import extensions
from uniform_admin.extensions import db
from uniform_admin.models.audit_log import AuditLog
from uniform_admin.services import (
    backend_client,
    image_service,
    note_service,
    storage_service,
)
from uniform_admin.services.backend_client import BackendError
from uniform_admin.services.variant_service import to_number

logger = logging.getLogger(__name__)


def _with_display_note(item):
    item = dict(item)
    item["displayNote"] = note_service.display_note(item)
    return item


def list_items(
    search=None, education_level=None, item_type=None, category=None,
    page=1, limit=20,
):
    """Fetch a page of items with filters for the items screen."""
    body = backend_client.get(
        "/items",
        params={
            "search": search or None,
            "educationLevel": education_level or None,
            "itemType": item_type or None,
            "category": category or None,
            "page": page,
            "limit": limit,
        },
    )
    items = body.get("data") or []
    return {
        "items": [_with_display_note(item) for item in items],
        "pagination": body.get("pagination")
        or {"page": page, "limit": limit, "total": len(items)},
    }


def get_item(item_id):
    """Get a single item, or None if the backend does not know it."""
    try:
        body = backend_client.get(f"/items/{item_id}")
    except BackendError as e:
        if e.status_code == 404:
            return None
        raise
    item = body.get("data")
    return _with_display_note(item) if item else None


def create_item(item, admin_id):
    """Create an item and schedule the pre-order check when it has stock."""
    body = backend_client.post("/items", item)
    created = body.get("data") or {}

    AuditLog.record(
        admin_id,
        "CREATE_ITEM",
        target_type="item",
        target_id=created.get("id"),
        payload={
            "name": item.get("name"),
            "size": item.get("size"),
            "stock": item.get("stock"),
            "price": item.get("price"),
        },
    )
    db.session.commit()

    if created.get("id") is not None and to_number(item.get("stock")) > 0:
        from uniform_admin.workers.pre_orders import record_pre_order_matches

        extensions.task_queue.enqueue(
            record_pre_order_matches,
            created["id"],
            item.get("name"),
            item.get("educationLevel"),
            item.get("size"),
            admin_id,
            retry=Retry(max=2),
        )
    return created


def update_item(item_id, item, admin_id):
    body = backend_client.put(f"/items/{item_id}", item)
    updated = body.get("data") or {}
    AuditLog.record(
        admin_id,
        "UPDATE_ITEM",
        target_type="item",
        target_id=item_id,
        payload={
            "size": item.get("size"),
            "stock": item.get("stock"),
            "price": item.get("price"),
        },
    )
    db.session.commit()
    return updated


def delete_item(item_id, admin_id):
    """Delete an item; returns False when it did not exist."""
    item = get_item(item_id)
    if item is None:
        return False

    backend_client.delete(f"/items/{item_id}")
    AuditLog.record(
        admin_id,
        "DELETE_ITEM",
        target_type="item",
        target_id=item_id,
        payload={"name": item.get("name")},
    )
    db.session.commit()

    storage_key = storage_service.key_from_public_url(item.get("image"))
    if storage_key:
        try:
            storage_service.remove(storage_key)
        except Exception:
            logger.exception("Failed to delete image %s of item %s", storage_key, item_id)
    return True


def upload_item_image(image_bytes, admin_id, max_size=image_service.DEFAULT_MAX_BYTES):
    """Clean up, store and return the public URL of an item image."""
    data = image_service.prepare_item_image(image_bytes, max_bytes=max_size)
    storage_key = storage_service.new_item_key()
    url = storage_service.put_item_image(storage_key, data)

    AuditLog.record(
        admin_id,
        "UPLOAD_ITEM_IMAGE",
        target_type="image",
        target_id=storage_key,
        payload={"bytes": len(data)},
    )
    db.session.commit()
    return url
