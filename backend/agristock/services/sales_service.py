"""
Sales ledger: append-only sale records plus deletion.

Recording a sale that references a stock item also decrements that item.
The two collections are written separately (sales first, then stock) and
there is no rollback: if the stock write fails the sale is durable but the
decrement is only in memory. Deleting a sale never restores stock.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Mapping

from ..models import Sale, StockItem, compute_total
from ..time_utils import localnow, parse_iso_datetime, parse_sale_date, start_of_day, subtract_months, to_utc_z, utcnow
from ..validation import parse_number, parse_period, parse_text
from .identifier_service import RecordIdAllocator
from .inventory_service import InventoryLedger

logger = logging.getLogger(__name__)

WEEK_DAYS = 7


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def _created_key(sale: Sale) -> datetime:
    try:
        created = parse_iso_datetime(sale.created_at)
    except ValueError:
        created = None
    return created or datetime.min


def sale_defaults_from_stock(item: StockItem) -> dict:
    """Pre-fill values for a sale drawn from a picked stock item."""
    return {
        "fertilizer_name": item.name,
        "fertilizer_id": item.id,
        "price": item.price,
        "unit": item.unit,
        "how_to_use": item.how_to_use,
    }


def sale_form_defaults(today=None) -> dict:
    today = today or localnow().date()
    return {
        "fertilizer_name": "",
        "fertilizer_id": "",
        "price": "",
        "quantity": "",
        "unit": "kg",
        "how_to_use": "",
        "sale_date": today.isoformat(),
        "customer_name": "",
        "customer_phone": "",
        "customer_email": "",
        "customer_address": "",
        "payment_method": "Cash",
        "notes": "",
    }


class SalesLedger:
    def __init__(
        self,
        store,
        collection: str,
        inventory: InventoryLedger,
        ids: RecordIdAllocator | None = None,
    ):
        self._store = store
        self.collection = collection
        self.inventory = inventory
        self._ids = ids or RecordIdAllocator()
        self._sales: list[Sale] = []

    def load(self) -> None:
        self._sales = [Sale.from_dict(r) for r in self._store.load(self.collection)]
        self._ids.observe(sale.id for sale in self._sales)
        logger.info("Loaded %d sales from %s", len(self._sales), self.collection)

    def persist(self) -> bool:
        return self._store.save(self.collection, [sale.to_dict() for sale in self._sales])

    @property
    def sales(self) -> list[Sale]:
        return list(self._sales)

    def __len__(self) -> int:
        return len(self._sales)

    def get(self, sale_id: str | None) -> Sale | None:
        if not sale_id:
            return None
        for sale in self._sales:
            if sale.id == sale_id:
                return sale
        return None

    def check_available_quantity(self, fertilizer_id: str | None, quantity: Any) -> None:
        """
        Advisory stock check for the sale form.

        Raises SaleError when the referenced item holds less than requested.
        record_sale() does not call this; callers decide whether to block.
        """
        item = self.inventory.get(fertilizer_id)
        if item is None:
            return

        requested = parse_number(quantity)
        if requested > item.quantity:
            raise SaleError(
                f"Insufficient stock! Only {item.quantity:g} {item.unit} available.",
                details={
                    "fertilizer_id": item.id,
                    "requested_quantity": requested,
                    "on_hand": item.quantity,
                },
            )

    def record_sale(self, data: Mapping[str, Any], now: datetime | None = None) -> Sale:
        """
        Append a sale and write it through; decrement referenced stock.

        Required-field presence is the caller's job (see validation.py);
        incomplete input is stored as given.
        """
        price = parse_number(data.get("price"))
        quantity = parse_number(data.get("quantity"))

        sale = Sale(
            id=self._ids.next_id(),
            created_at=to_utc_z(now or utcnow(), timespec="milliseconds"),
            sale_date=parse_text(data.get("sale_date")),
            fertilizer_id=parse_text(data.get("fertilizer_id")).strip() or None,
            fertilizer_name=parse_text(data.get("fertilizer_name")),
            price=price,
            quantity=quantity,
            total_price=round(compute_total(price, quantity), 2),
            unit=parse_text(data.get("unit")),
            how_to_use=parse_text(data.get("how_to_use")),
            customer_name=parse_text(data.get("customer_name")),
            customer_phone=parse_text(data.get("customer_phone")),
            customer_address=parse_text(data.get("customer_address")),
            customer_email=parse_text(data.get("customer_email")),
            payment_method=parse_text(data.get("payment_method")),
            notes=parse_text(data.get("notes")),
        )

        self._sales.append(sale)
        self.persist()
        logger.info("Recorded sale %s: %s x %s = %s", sale.id, sale.fertilizer_name, sale.quantity, sale.total_price)

        if sale.fertilizer_id:
            self.inventory.decrement_stock(sale.fertilizer_id, quantity)

        return sale

    def delete_sale(self, sale_id: str | None) -> bool:
        sale = self.get(sale_id)
        if sale is None:
            return False

        self._sales = [s for s in self._sales if s.id != sale.id]
        self.persist()
        logger.info("Deleted sale %s", sale.id)
        return True

    def recent_sales(self, n: int = 5) -> list[Sale]:
        # sorted() is stable under reverse=True, so equal timestamps keep insertion order
        ordered = sorted(self._sales, key=_created_key, reverse=True)
        return ordered[:max(n, 0)]

    def total_revenue(self) -> float:
        return total_revenue(self._sales)

    def filter_by_period(self, period: str, reference_time: datetime | None = None) -> list[Sale]:
        return filter_by_period(self._sales, period, reference_time)

    def search(self, text: str | None) -> list[Sale]:
        return search_sales(self._sales, text)

    def history(self, period: str = "all", text: str | None = None, reference_time: datetime | None = None) -> dict:
        """Period filter, then text search, newest first, with the filtered revenue."""
        matched = search_sales(filter_by_period(self._sales, period, reference_time), text)
        matched = sorted(matched, key=_created_key, reverse=True)
        return {
            "period": parse_period(period),
            "sales": matched,
            "count": len(matched),
            "revenue": total_revenue(matched),
        }


def total_revenue(sales) -> float:
    return sum((parse_number(sale.total_price) for sale in sales), 0.0)


def filter_by_period(sales, period: str, reference_time: datetime | None = None) -> list[Sale]:
    """
    Filter sales by sale_date relative to reference_time (local calendar).

    - today: same calendar day
    - week: sale_date (midnight) >= reference_time - 7 days
    - month: sale_date (midnight) >= reference_time - 1 calendar month
    Sales without a parseable date only survive the "all" period.
    """
    period = parse_period(period)
    if period == "all":
        return list(sales)

    reference_time = reference_time or localnow()

    if period == "today":
        today = reference_time.date()
        return [s for s in sales if parse_sale_date(s.sale_date) == today]

    if period == "week":
        cutoff = reference_time - timedelta(days=WEEK_DAYS)
    else:
        cutoff = subtract_months(reference_time, 1)

    result = []
    for sale in sales:
        sale_day = parse_sale_date(sale.sale_date)
        if sale_day is not None and start_of_day(sale_day) >= cutoff:
            result.append(sale)
    return result


def search_sales(sales, text: str | None) -> list[Sale]:
    needle = parse_text(text).strip().lower()
    if not needle:
        return list(sales)
    return [
        s for s in sales
        if needle in s.fertilizer_name.lower() or needle in s.customer_name.lower()
    ]
