# Overview: Flask API routes for sales; parses form input and returns JSON responses.

# backend/agristock/routes/sales.py
"""Sales API routes"""

from flask import Blueprint, current_app, jsonify, request

from ..services.sales_service import SaleError, sale_defaults_from_stock, sale_form_defaults
from ..services.session_service import get_store_session
from ..validation import PAYMENT_METHODS, ValidationError, parse_number, validate_sale_input


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("/")
def list_sales_route():
    """
    Sales history, newest first.

    Query: period (all|today|week|month), q (product or customer substring)
    """
    period = request.args.get("period", "all")
    text = request.args.get("q")

    try:
        history = get_store_session().sales.history(period, text)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    history["sales"] = [sale.to_dict() for sale in history["sales"]]
    return jsonify(history), 200


@sales_bp.get("/recent")
def recent_sales_route():
    limit = request.args.get("limit", current_app.config["RECENT_SALES_LIMIT"], type=int)
    sales = get_store_session().sales.recent_sales(limit)
    return jsonify({"sales": [sale.to_dict() for sale in sales]}), 200


@sales_bp.get("/form")
def sale_form_route():
    """Blank sale form, optionally pre-filled from a stock item (?stock_id=)."""
    form = sale_form_defaults()
    stock_id = request.args.get("stock_id")
    if stock_id:
        item = get_store_session().inventory.get(stock_id)
        if item is None:
            return jsonify({"error": "Stock item not found"}), 404
        form.update(sale_defaults_from_stock(item))
    return jsonify({"form": form, "payment_methods": list(PAYMENT_METHODS)}), 200


@sales_bp.post("/")
def record_sale_route():
    """
    Record a sale.

    Required: fertilizer_name, price, quantity, customer_name, customer_phone
    A sale that names a stock item is refused when it asks for more than is
    on hand; the ledger itself would allow it.
    """
    payload = request.get_json(silent=True) or {}

    try:
        data = validate_sale_input(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    session = get_store_session()
    try:
        with session.lock:
            session.sales.check_available_quantity(data.get("fertilizer_id"), data.get("quantity"))
            sale = session.sales.record_sale(data)
        return jsonify({
            "sale": sale.to_dict(),
            "total": parse_number(sale.total_price),
        }), 201
    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.delete("/<sale_id>")
def delete_sale_route(sale_id: str):
    """Remove a sale record. Stock is not restored."""
    try:
        session = get_store_session()
        with session.lock:
            deleted = session.sales.delete_sale(sale_id)
    except Exception:
        current_app.logger.exception("Failed to delete sale")
        return jsonify({"error": "Internal server error"}), 500

    if not deleted:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"deleted": sale_id}), 200
