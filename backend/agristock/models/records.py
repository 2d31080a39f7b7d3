"""
Record shapes for the two persisted collections and the derived customer.

Stock items and sales are stored as flat key-value records (see
services/persistence_service.py). from_dict() is tolerant: persisted data may
have been written by an older build or edited by hand, so every field is
coerced and defaulted instead of rejected.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

from agristock.validation import DEFAULT_MIN_STOCK, parse_min_stock, parse_number, parse_text


def compute_total(price: float, quantity: float) -> float:
    return price * quantity


def is_low_stock(item: "StockItem") -> bool:
    threshold = item.min_stock if item.min_stock is not None else DEFAULT_MIN_STOCK
    return item.quantity < threshold


def _optional_id(value: Any) -> Optional[str]:
    text = parse_text(value).strip()
    return text or None


@dataclass
class StockItem:
    id: str
    name: str
    category: str = ""
    unit: str = ""
    price: float = 0.0
    quantity: float = 0.0
    min_stock: float = DEFAULT_MIN_STOCK
    how_to_use: str = ""
    supplier: str = ""

    @property
    def value(self) -> float:
        return self.price * self.quantity

    @property
    def display_category(self) -> str:
        return self.category or "General"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StockItem":
        return cls(
            id=parse_text(data.get("id")),
            name=parse_text(data.get("name")),
            category=parse_text(data.get("category")),
            unit=parse_text(data.get("unit")),
            price=parse_number(data.get("price")),
            quantity=parse_number(data.get("quantity")),
            min_stock=parse_min_stock(data.get("min_stock")),
            how_to_use=parse_text(data.get("how_to_use")),
            supplier=parse_text(data.get("supplier")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Sale:
    """
    Snapshot of one transaction.

    Product attributes are copied at sale time; later stock edits never
    reach back into a sale. total_price is computed once and stored.
    """
    id: str
    created_at: str
    sale_date: str
    fertilizer_name: str
    price: float
    quantity: float
    total_price: float
    fertilizer_id: Optional[str] = None
    unit: str = ""
    how_to_use: str = ""
    customer_name: str = ""
    customer_phone: str = ""
    customer_address: str = ""
    customer_email: str = ""
    payment_method: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Sale":
        return cls(
            id=parse_text(data.get("id")),
            created_at=parse_text(data.get("created_at")),
            sale_date=parse_text(data.get("sale_date")),
            fertilizer_id=_optional_id(data.get("fertilizer_id")),
            fertilizer_name=parse_text(data.get("fertilizer_name")),
            price=parse_number(data.get("price")),
            quantity=parse_number(data.get("quantity")),
            total_price=parse_number(data.get("total_price")),
            unit=parse_text(data.get("unit")),
            how_to_use=parse_text(data.get("how_to_use")),
            customer_name=parse_text(data.get("customer_name")),
            customer_phone=parse_text(data.get("customer_phone")),
            customer_address=parse_text(data.get("customer_address")),
            customer_email=parse_text(data.get("customer_email")),
            payment_method=parse_text(data.get("payment_method")),
            notes=parse_text(data.get("notes")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Customer:
    """Derived from sales on every read; never persisted."""
    name: str
    phone: str
    address: str
    total_purchases: int = 0
    total_amount: float = 0.0
    last_purchase: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
