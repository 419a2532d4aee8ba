# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/stockdesk/routes/sales.py
"""Sales API routes with permission enforcement"""

from flask import Blueprint, request, jsonify, g, current_app

from ..errors import StockdeskError
from ..services import sales_service, reporting_service
from ..services.permission_service import user_has_permission
from ..decorators import require_auth, require_permission


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_auth
@require_permission("VIEW_SALES")
def list_sales_route():
    """
    List sales (newest first) with revenue, count and average order value.

    Available to: admin, manager, salesgirl
    """
    sales = sales_service.list_sales()
    return jsonify({
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
        "summary": reporting_service.sales_summary(sales),
    })


@sales_bp.get("/<int:sale_id>")
@require_auth
@require_permission("VIEW_SALES")
def get_sale_route(sale_id: int):
    try:
        sale = sales_service.get_sale(sale_id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    return jsonify({"sale": sale.to_dict()})


@sales_bp.post("")
@require_auth
@require_permission("CREATE_SALE")
def place_sale_route():
    """
    Record a sale and deduct stock.

    Request body:
    - product_id: int (required)
    - quantity: int > 0 (required)
    - payment_mode: POS | transfer | cash (required)
    - salesperson_id: int (optional; only honored for callers who can
      reverse sales, everyone else sells as themselves)

    Available to: admin, manager, salesgirl
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    product_id = data.get("product_id")
    quantity = data.get("quantity")
    payment_mode = data.get("payment_mode")

    if product_id is None or quantity is None or not payment_mode:
        return jsonify({"error": "product_id, quantity and payment_mode required"}), 400

    if isinstance(product_id, bool) or not isinstance(product_id, int):
        return jsonify({"error": "product_id must be an integer"}), 400

    salesperson_id = g.current_user.id
    requested_salesperson = data.get("salesperson_id")
    if requested_salesperson is not None and user_has_permission(g.current_user, "REVERSE_SALE"):
        if isinstance(requested_salesperson, bool) or not isinstance(requested_salesperson, int):
            return jsonify({"error": "salesperson_id must be an integer"}), 400
        salesperson_id = requested_salesperson

    try:
        sale = sales_service.place_sale(
            product_id=product_id,
            quantity=quantity,
            payment_mode=payment_mode,
            salesperson_id=salesperson_id,
        )
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to place sale")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info(
        "Sale placed: id=%s product_id=%s quantity=%s total_cents=%s by user_id=%s",
        sale.id, sale.product_id, sale.quantity, sale.total_cents, g.current_user.id,
    )
    return jsonify({"sale": sale.to_dict()}), 201


@sales_bp.delete("/<int:sale_id>")
@require_auth
@require_permission("REVERSE_SALE")
def reverse_sale_route(sale_id: int):
    """
    Delete a sale and restore its quantity to stock.

    Available to: admin, manager
    """
    try:
        sale = sales_service.reverse_sale(sale_id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to reverse sale")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info(
        "Sale reversed: id=%s product_id=%s quantity=%s by user_id=%s",
        sale_id, sale["product_id"], sale["quantity"], g.current_user.id,
    )
    return jsonify({"sale": sale, "reversed": True}), 200
