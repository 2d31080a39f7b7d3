# Overview: Flask API routes for stock; parses form input and returns JSON responses.

# backend/agristock/routes/stock.py
"""
Stock routes.

Deletion confirmation is a client concern: DELETE removes immediately.
"""
from flask import Blueprint, current_app, jsonify, request

from ..services.session_service import get_store_session
from ..validation import STOCK_CATEGORIES, UNITS, ValidationError, validate_stock_input


stock_bp = Blueprint("stock", __name__, url_prefix="/api/stock")


@stock_bp.get("/")
def list_stock_route():
    inventory = get_store_session().inventory
    return jsonify({
        "items": [item.to_dict() for item in inventory.items],
        "total_value": inventory.total_value(),
        "total_units": inventory.total_units(),
    }), 200


@stock_bp.get("/low")
def low_stock_route():
    items = get_store_session().inventory.list_low_stock()
    return jsonify({"items": [item.to_dict() for item in items]}), 200


@stock_bp.get("/options")
def stock_options_route():
    return jsonify({"units": list(UNITS), "categories": list(STOCK_CATEGORIES)}), 200


@stock_bp.post("/")
def add_stock_route():
    """
    Add a new product line, or merge into an existing one by name.

    Required: name, price, quantity
    """
    payload = request.get_json(silent=True) or {}

    try:
        data = validate_stock_input(payload)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        session = get_store_session()
        with session.lock:
            item = session.inventory.add_or_merge_stock(data)
        return jsonify({"item": item.to_dict()}), 201
    except Exception:
        current_app.logger.exception("Failed to save stock")
        return jsonify({"error": "Internal server error"}), 500


@stock_bp.delete("/<item_id>")
def delete_stock_route(item_id: str):
    try:
        session = get_store_session()
        with session.lock:
            deleted = session.inventory.delete_stock(item_id)
    except Exception:
        current_app.logger.exception("Failed to delete stock item")
        return jsonify({"error": "Internal server error"}), 500

    if not deleted:
        return jsonify({"error": "Stock item not found"}), 404
    return jsonify({"deleted": item_id}), 200
