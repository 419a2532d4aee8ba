# Overview: Flask API routes for expense operations; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import StockdeskError
from ..services import expenses_service
from ..decorators import require_auth, require_permission


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
@require_permission("VIEW_EXPENSES")
def list_expenses_route():
    expenses = expenses_service.list_expenses()
    return jsonify({
        "items": [e.to_dict() for e in expenses],
        "count": len(expenses),
        "categories": list(expenses_service.EXPENSE_CATEGORIES),
    })


@expenses_bp.post("")
@require_auth
@require_permission("MANAGE_EXPENSES")
def create_expense_route():
    """
    Record an expense on behalf of the caller.

    Request body: description, amount_cents (> 0), category.
    """
    payload = request.get_json(silent=True) or {}

    try:
        expense = expenses_service.create_expense(payload, created_by_user_id=g.current_user.id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to create expense")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(expense.to_dict()), 201


@expenses_bp.delete("/<int:expense_id>")
@require_auth
@require_permission("MANAGE_EXPENSES")
def delete_expense_route(expense_id: int):
    try:
        expenses_service.delete_expense(expense_id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to delete expense")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"ok": True}), 200
