from flask import Blueprint, jsonify, request

from ..services.customer_service import derive_customers, search_customers
from ..services.session_service import get_store_session


customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.get("/")
def list_customers_route():
    customers = derive_customers(get_store_session().sales.sales)
    customers = search_customers(customers, request.args.get("q"))
    return jsonify({"customers": [c.to_dict() for c in customers]}), 200
