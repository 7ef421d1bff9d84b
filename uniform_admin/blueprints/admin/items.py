"""Items screen: listing, details, delete, image upload, pre-order check."""
import logging
from flask import current_app, g, request

from uniform_admin.blueprints.admin import admin_bp
from uniform_admin.services import editor_service, item_service, pre_order_service

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@admin_bp.route("/items", methods=["GET"])
def list_items():
    """Items with search, education level, item type and category filters."""
    page = request.args.get("page", 1, type=int)
    limit = min(request.args.get("limit", 20, type=int), MAX_PAGE_SIZE)
    result = item_service.list_items(
        search=request.args.get("search"),
        education_level=request.args.get("educationLevel"),
        item_type=request.args.get("itemType"),
        category=request.args.get("category"),
        page=max(page, 1),
        limit=max(limit, 1),
    )
    return {"success": True, "data": result["items"], "pagination": result["pagination"]}


@admin_bp.route("/items/pre-orders", methods=["GET"])
def pre_order_count():
    """How many students would be notified if this item were added."""
    count = pre_order_service.count_matching_pre_orders(
        request.args.get("name"),
        request.args.get("educationLevel"),
        request.args.get("size"),
    )
    return {"success": True, "data": {"count": count}}


@admin_bp.route("/items/images", methods=["POST"])
def upload_image():
    """Upload an item image; an open editor picks up the new URL."""
    upload = request.files.get("image")
    if upload is None:
        raise ValueError("image file is required")
    url = item_service.upload_item_image(
        upload.read(),
        g.admin_id,
        max_size=current_app.config["MAX_IMAGE_SIZE"],
    )

    editor = editor_service.load_editor()
    if editor is not None:
        editor.update_fields({"image": url})
        editor_service.save_editor(editor)
    return {"success": True, "data": {"url": url}}, 201


@admin_bp.route("/items/<item_id>", methods=["GET"])
def get_item(item_id):
    item = item_service.get_item(item_id)
    if item is None:
        return {"success": False, "message": f"Item {item_id} not found"}, 404
    return {"success": True, "data": item}


@admin_bp.route("/items/<item_id>", methods=["DELETE"])
def delete_item(item_id):
    if not item_service.delete_item(item_id, g.admin_id):
        return {"success": False, "message": f"Item {item_id} not found"}, 404
    logger.info("Item %s deleted by %s", item_id, g.admin_id)
    return {"success": True}
