from __future__ import annotations

import math
from typing import Any, Mapping


DEFAULT_MIN_STOCK = 10.0

PERIODS = ("all", "today", "week", "month")

UNITS = ("kg", "g", "L", "mL", "bags", "packets", "tons")
PAYMENT_METHODS = ("Cash", "Card", "UPI", "Bank Transfer", "Credit")
STOCK_CATEGORIES = (
    "Nitrogen Fertilizer",
    "Phosphorus Fertilizer",
    "Potassium Fertilizer",
    "NPK Compound",
    "Organic",
    "Bio-fertilizer",
    "Micronutrients",
    "Other",
)

STOCK_REQUIRED_FIELDS = ("name", "price", "quantity")
SALE_REQUIRED_FIELDS = ("fertilizer_name", "price", "quantity", "customer_name", "customer_phone")


class ValidationError(ValueError):
    """400-level input problem."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Coerce form input to a float.

    - int/float -> float
    - str -> float of the stripped text ("12.5", " 3 ")
    - None, "", bool, NaN/inf, or anything unparseable -> default
    """
    if _is_number(value):
        result = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return default
        try:
            result = float(stripped)
        except ValueError:
            return default
    else:
        return default

    if math.isnan(result) or math.isinf(result):
        return default
    return result


def parse_min_stock(value: Any) -> float:
    """Low-stock threshold; 10 when missing or non-numeric."""
    return parse_number(value, default=DEFAULT_MIN_STOCK)


def parse_text(value: Any) -> str:
    """Free text as typed; None -> "". Not stripped, names match exactly apart from case."""
    if value is None:
        return ""
    return str(value)


def parse_period(value: Any) -> str:
    period = parse_text(value).strip().lower() or "all"
    if period not in PERIODS:
        raise ValidationError(f"period must be one of {', '.join(PERIODS)}")
    return period


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(payload: Mapping[str, Any], fields) -> None:
    missing = [f for f in fields if _is_blank(payload.get(f))]
    if missing:
        raise ValidationError(f"missing required fields: {', '.join(missing)}")


def validate_stock_input(payload: Mapping[str, Any]) -> dict:
    """Boundary checks for the add-stock form."""
    require_fields(payload, STOCK_REQUIRED_FIELDS)

    unit = parse_text(payload.get("unit")).strip()
    if unit and unit not in UNITS:
        raise ValidationError(f"unit must be one of {', '.join(UNITS)}")

    if parse_number(payload.get("price"), default=-1.0) < 0:
        raise ValidationError("price must be a non-negative number")
    if parse_number(payload.get("quantity"), default=-1.0) < 0:
        raise ValidationError("quantity must be a non-negative number")

    return dict(payload)


def validate_sale_input(payload: Mapping[str, Any]) -> dict:
    """Boundary checks for the new-sale form."""
    require_fields(payload, SALE_REQUIRED_FIELDS)

    method = parse_text(payload.get("payment_method")).strip() or "Cash"
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"payment_method must be one of {', '.join(PAYMENT_METHODS)}")

    unit = parse_text(payload.get("unit")).strip()
    if unit and unit not in UNITS:
        raise ValidationError(f"unit must be one of {', '.join(UNITS)}")

    if parse_number(payload.get("price"), default=-1.0) < 0:
        raise ValidationError("price must be a non-negative number")
    if parse_number(payload.get("quantity"), default=0.0) <= 0:
        raise ValidationError("quantity must be a positive number")

    data = dict(payload)
    data["payment_method"] = method
    return data
