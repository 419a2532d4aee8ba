# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/stockdesk/routes/products.py
"""
Product management routes.

- Read operations require VIEW_PRODUCTS permission
- Write operations require MANAGE_PRODUCTS permission
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..errors import StockdeskError
from ..services import products_service
from ..decorators import require_auth, require_permission

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission("VIEW_PRODUCTS")
def list_products():
    """List all products, alphabetical by name."""
    products = products_service.list_products()
    return jsonify({
        "items": [p.to_dict() for p in products],
        "count": len(products),
    })


@products_bp.get("/<int:product_id>")
@require_auth
@require_permission("VIEW_PRODUCTS")
def get_product(product_id: int):
    try:
        product = products_service.get_product(product_id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    return jsonify(product.to_dict())


@products_bp.post("")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def create_product_route():
    """
    Create a new product.

    Request body: name, sku, category, quantity, reorder_level,
    price_cents, cost_cents (all required).
    """
    payload = request.get_json(silent=True) or {}

    try:
        product = products_service.create_product(payload)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info("Product created: id=%s sku=%s by user_id=%s", product.id, product.sku, g.current_user.id)
    return jsonify(product.to_dict()), 201


@products_bp.put("/<int:product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def update_product_route(product_id: int):
    """Update a product; only the supplied fields change."""
    payload = request.get_json(silent=True) or {}

    try:
        product = products_service.update_product(product_id, payload)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(product.to_dict()), 200


@products_bp.delete("/<int:product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def delete_product_route(product_id: int):
    """Delete a product. Its sales stay on record without a product link."""
    try:
        orphaned = products_service.delete_product(product_id)
    except StockdeskError as e:
        return jsonify(e.to_dict()), e.http_status
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Internal server error"}), 500

    current_app.logger.info(
        "Product deleted: id=%s orphaned_sales=%s by user_id=%s", product_id, orphaned, g.current_user.id
    )
    return jsonify({"ok": True, "orphaned_sales": orphaned}), 200
