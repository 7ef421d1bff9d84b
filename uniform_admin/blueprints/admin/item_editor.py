"""Item add/edit editor endpoints.

The editor state lives in the session between calls; every endpoint
answers with the full editor state so the front end can re-render.
"""
from flask import g

from uniform_admin.blueprints.admin import admin_bp, json_body
from uniform_admin.models.settings import Settings
from uniform_admin.services import editor_service


def _no_editor():
    return {"success": False, "message": "No item editor is open"}, 409


def _state(editor, **extra):
    body = {"success": True, "data": editor.state()}
    body.update(extra)
    return body


@admin_bp.route("/items/editor", methods=["POST"])
def open_editor():
    data = json_body()
    mode = data.get("mode", "add")
    item_id = data.get("itemId")
    if mode == "edit" and item_id is None:
        raise ValueError("itemId is required to edit an item")
    editor = editor_service.open_editor(mode, item_id)
    if editor is None:
        return {"success": False, "message": f"Item {item_id} not found"}, 404
    return _state(editor), 201


@admin_bp.route("/items/editor", methods=["GET"])
def get_editor():
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    return _state(editor)


@admin_bp.route("/items/editor", methods=["DELETE"])
def close_editor():
    """Discard the editor; nothing is saved."""
    editor_service.discard_editor()
    return {"success": True}


@admin_bp.route("/items/editor/fields", methods=["PATCH"])
def update_fields():
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    editor.update_fields(json_body())
    editor_service.save_editor(editor)
    return _state(editor)


@admin_bp.route("/items/editor/rows", methods=["POST"])
def add_row():
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    index = editor.add_row()
    editor_service.save_editor(editor)
    return _state(editor, index=index), 201


@admin_bp.route("/items/editor/rows/<int:index>", methods=["DELETE"])
def remove_row(index):
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    removed = editor.remove_row(index)
    editor_service.save_editor(editor)
    return _state(editor, removed=removed)


@admin_bp.route("/items/editor/rows/<int:index>", methods=["PATCH"])
def update_row(index):
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    data = json_body()
    try:
        editor.set_row(
            index,
            label=data.get("label"),
            stock=data.get("stock"),
            price=data.get("price"),
        )
    except IndexError:
        return {"success": False, "message": f"Row {index} not found"}, 404
    editor_service.save_editor(editor)
    return _state(editor)


@admin_bp.route("/items/editor/rows/<int:index>/toggle", methods=["POST"])
def toggle_row(index):
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    checked = json_body().get("checked")
    if not isinstance(checked, bool):
        raise ValueError("checked must be true or false")
    try:
        editor.toggle_row(index, checked)
    except IndexError:
        return {"success": False, "message": f"Row {index} not found"}, 404
    editor_service.save_editor(editor)
    return _state(editor)


@admin_bp.route("/items/editor/submit", methods=["POST"])
def submit_editor():
    editor = editor_service.load_editor()
    if editor is None:
        return _no_editor()
    saved = editor_service.submit_editor(editor, g.admin_id)
    status = 201 if editor.mode == "add" else 200
    return {"success": True, "data": saved}, status


@admin_bp.route("/items/editor/suggestions", methods=["GET"])
def size_suggestions():
    return {"success": True, "data": Settings.get_suggested_sizes()}
