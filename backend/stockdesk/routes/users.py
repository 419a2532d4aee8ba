# Overview: Flask API routes for staff account management.

"""
Users can only be created by administrators; there is no self-registration.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import StockdeskError
from ..services import auth_service
from ..decorators import require_auth, require_permission

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_permission("VIEW_USERS")
def list_users():
    users = auth_service.list_users()
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)})


@users_bp.post("")
@require_auth
@require_permission("MANAGE_USERS")
def create_user():
    """
    Create a new user.

    Request body:
    - email: str (required, unique)
    - name: str (required)
    - role: admin | manager | salesgirl (required)
    - password: str (required)
    """
    payload = request.get_json(silent=True) or {}

    try:
        user = auth_service.create_user(payload)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info("User created: id=%s role=%s by user_id=%s", user.id, user.role, g.current_user.id)
    return jsonify({"user": user.to_dict()}), 201


@users_bp.delete("/<int:user_id>")
@require_auth
@require_permission("MANAGE_USERS")
def delete_user(user_id: int):
    if user_id == g.current_user.id:
        return jsonify({"error": "You cannot delete your own account"}), 400

    try:
        auth_service.delete_user(user_id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to delete user")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info("User deleted: id=%s by user_id=%s", user_id, g.current_user.id)
    return jsonify({"ok": True}), 200
