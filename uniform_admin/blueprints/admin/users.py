"""Staff user and student management."""
from flask import g, request

from uniform_admin.blueprints.admin import admin_bp, json_body
from uniform_admin.services import user_service


def _user_filters():
    filters = {}
    for key in user_service.USER_FILTERS:
        if key in request.args:
            filters[key] = request.args.get(key)
    return filters


@admin_bp.route("/users", methods=["GET"])
def list_users():
    result = user_service.list_users(
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
        **_user_filters(),
    )
    return {"success": True, "data": result["users"], "pagination": result["pagination"]}


@admin_bp.route("/users", methods=["POST"])
def create_user():
    user = user_service.create_user(json_body(), g.admin_id)
    return {"success": True, "data": user}, 201


@admin_bp.route("/users/bulk-update", methods=["PATCH"])
def bulk_update_users():
    data = json_body()
    result = user_service.bulk_update_users(
        data.get("userIds") or [], data.get("updateData") or {}, g.admin_id
    )
    return {"success": True, "data": result}


@admin_bp.route("/users/<user_id>", methods=["GET"])
def get_user(user_id):
    user = user_service.get_user(user_id)
    if user is None:
        return {"success": False, "message": f"User {user_id} not found"}, 404
    return {"success": True, "data": user}


@admin_bp.route("/users/<user_id>", methods=["PUT"])
def update_user(user_id):
    user = user_service.update_user(user_id, json_body(), g.admin_id)
    return {"success": True, "data": user}


@admin_bp.route("/users/<user_id>", methods=["DELETE"])
def disable_user(user_id):
    if not user_service.disable_user(user_id, g.admin_id):
        return {"success": False, "message": f"User {user_id} not found"}, 404
    return {"success": True}


@admin_bp.route("/students", methods=["GET"])
def list_students():
    result = user_service.list_students(
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", 10, type=int),
        **_user_filters(),
    )
    return {"success": True, "data": result["users"], "pagination": result["pagination"]}


@admin_bp.route("/students", methods=["POST"])
def create_student():
    student = user_service.create_student(json_body(), g.admin_id)
    return {"success": True, "data": student}, 201


@admin_bp.route("/students/<student_id>", methods=["PUT"])
def update_student(student_id):
    student = user_service.update_student(student_id, json_body(), g.admin_id)
    return {"success": True, "data": student}


@admin_bp.route("/students/initials", methods=["GET"])
def student_initials():
    """Suggested initials suffix for a student number."""
    return {
        "success": True,
        "data": {"initials": user_service.suggested_initials(request.args.get("name"))},
    }
