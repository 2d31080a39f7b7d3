from flask import Blueprint, current_app, jsonify, request

from ..services import reporting_service
from ..services.session_service import get_store_session


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/dashboard")
def dashboard_report():
    summary = reporting_service.dashboard_summary(
        get_store_session(),
        recent_limit=current_app.config["RECENT_SALES_LIMIT"],
        days=current_app.config["REVENUE_SERIES_DAYS"],
    )
    return jsonify(summary), 200


@reports_bp.get("/analytics")
def analytics_report():
    summary = reporting_service.analytics_summary(
        get_store_session(),
        top_limit=current_app.config["TOP_PRODUCTS_LIMIT"],
        threshold=current_app.config["ANALYTICS_LOW_STOCK_THRESHOLD"],
    )
    return jsonify(summary), 200


@reports_bp.get("/revenue")
def revenue_report():
    days = request.args.get("days", current_app.config["REVENUE_SERIES_DAYS"], type=int)

    try:
        rows = reporting_service.revenue_series(get_store_session().sales.sales, days)
        return jsonify({"days": days, "rows": rows}), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/payments")
def payments_report():
    rows = reporting_service.payment_breakdown(get_store_session().sales.sales)
    return jsonify({"rows": rows}), 200


@reports_bp.get("/top-products")
def top_products_report():
    limit = request.args.get("limit", current_app.config["TOP_PRODUCTS_LIMIT"], type=int)

    try:
        rows = reporting_service.top_products(get_store_session().sales.sales, limit)
        return jsonify({"limit": limit, "rows": rows}), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/monthly")
def monthly_report():
    rows = reporting_service.monthly_revenue(get_store_session().sales.sales)
    return jsonify({"rows": rows}), 200


@reports_bp.get("/stock")
def stock_report():
    summary = reporting_service.stock_summary(
        get_store_session().inventory.items,
        current_app.config["ANALYTICS_LOW_STOCK_THRESHOLD"],
    )
    return jsonify(summary), 200
