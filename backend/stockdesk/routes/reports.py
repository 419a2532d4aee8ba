from flask import Blueprint, jsonify

from ..decorators import require_auth, require_permission
from ..services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard():
    records = reporting_service.load_records()
    return jsonify({
        "stats": reporting_service.dashboard_stats(records),
        "low_stock_products": [p.to_dict() for p in reporting_service.low_stock_products(records.products)],
        "recent_sales": [s.to_dict() for s in reversed(records.sales[-5:])],
    }), 200


@reports_bp.get("/summary")
@require_auth
@require_permission("VIEW_REPORTS")
def summary():
    records = reporting_service.load_records()
    return jsonify(reporting_service.summary_report(records)), 200
