# Overview: Read-only analytics over the sales and stock ledgers.

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from ..config import Config
from ..models import Sale, StockItem
from ..time_utils import localnow, parse_sale_date
from ..validation import parse_number
from .customer_service import derive_customers
from .sales_service import total_revenue

"""
Reporting semantics:
- Nothing in this module mutates or persists anything.
- Day and month buckets use the sale_date as a local calendar date.
- monthly_revenue() groups by month name only ("Jan", "Feb", ...), so the
  same month in different years lands in one bucket.
- stock_summary() flags items under a fixed threshold (Config default 10),
  not each item's own min_stock. The inventory ledger's low-stock list
  uses min_stock; the two can disagree.
- Sales whose sale_date does not parse fall into no day or month bucket.
"""


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def revenue_series(
    sales: Iterable[Sale],
    days: int = 7,
    reference_time: datetime | None = None,
) -> list[dict]:
    """One bucket per calendar day for the last `days` days, oldest first."""
    if days < 1:
        raise ReportError("days must be at least 1")

    today = (reference_time or localnow()).date()
    first_day = today - timedelta(days=days - 1)

    buckets = {}
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        buckets[day] = {
            "label": day.strftime("%a"),
            "date": day.isoformat(),
            "revenue": 0.0,
            "sale_count": 0,
        }

    for sale in sales:
        bucket = buckets.get(parse_sale_date(sale.sale_date))
        if bucket is None:
            continue
        bucket["revenue"] += parse_number(sale.total_price)
        bucket["sale_count"] += 1

    return list(buckets.values())


def payment_breakdown(sales: Iterable[Sale]) -> list[dict]:
    totals: dict[str, float] = {}
    for sale in sales:
        totals[sale.payment_method] = totals.get(sale.payment_method, 0.0) + parse_number(sale.total_price)
    return [{"method": method, "amount": amount} for method, amount in totals.items()]


def top_products(sales: Iterable[Sale], limit: int = 5) -> list[dict]:
    """Products ranked by revenue; exact ties keep first-seen order."""
    if limit < 1:
        raise ReportError("limit must be at least 1")

    groups: dict[str, dict] = {}
    for sale in sales:
        group = groups.setdefault(
            sale.fertilizer_name,
            {"name": sale.fertilizer_name, "count": 0, "revenue": 0.0, "quantity_sold": 0.0},
        )
        group["count"] += 1
        group["revenue"] += parse_number(sale.total_price)
        group["quantity_sold"] += parse_number(sale.quantity)

    ranked = sorted(groups.values(), key=lambda g: g["revenue"], reverse=True)
    return ranked[:limit]


def monthly_revenue(sales: Iterable[Sale]) -> list[dict]:
    months: dict[str, dict] = {}
    for sale in sales:
        sale_day = parse_sale_date(sale.sale_date)
        if sale_day is None:
            continue
        month = sale_day.strftime("%b")
        row = months.setdefault(month, {"month": month, "revenue": 0.0, "count": 0})
        row["revenue"] += parse_number(sale.total_price)
        row["count"] += 1
    return list(months.values())


def stock_summary(stock: Iterable[StockItem], threshold: float = Config.ANALYTICS_LOW_STOCK_THRESHOLD) -> dict:
    items = list(stock)
    return {
        "product_count": len(items),
        "total_units": sum((item.quantity for item in items), 0.0),
        "total_value": sum((item.price * item.quantity for item in items), 0.0),
        "low_stock": [item.to_dict() for item in items if item.quantity < threshold],
    }


def average_order_value(sales: list[Sale]) -> float:
    if not sales:
        return 0.0
    return total_revenue(sales) / len(sales)


def dashboard_summary(
    session,
    reference_time: datetime | None = None,
    *,
    recent_limit: int = 5,
    days: int = 7,
) -> dict:
    sales = session.sales.sales
    inventory = session.inventory
    low_stock = inventory.list_low_stock()

    return {
        "total_revenue": total_revenue(sales),
        "sale_count": len(sales),
        "stock_value": inventory.total_value(),
        "product_count": len(inventory),
        "low_stock_count": len(low_stock),
        "low_stock": [item.to_dict() for item in low_stock],
        "average_order_value": average_order_value(sales),
        "recent_sales": [sale.to_dict() for sale in session.sales.recent_sales(recent_limit)],
        "revenue_series": revenue_series(sales, days, reference_time),
    }


def analytics_summary(
    session,
    *,
    top_limit: int = 5,
    threshold: float = Config.ANALYTICS_LOW_STOCK_THRESHOLD,
) -> dict:
    sales = session.sales.sales
    customers = derive_customers(sales)
    revenue = total_revenue(sales)

    return {
        "total_revenue": revenue,
        "sale_count": len(sales),
        "customer_count": len(customers),
        "repeat_customer_count": sum(1 for c in customers if c.total_purchases > 1),
        "average_order_value": average_order_value(sales),
        "average_customer_value": (revenue / len(customers)) if customers else 0.0,
        "average_orders_per_customer": (len(sales) / len(customers)) if customers else 0.0,
        "payment_breakdown": payment_breakdown(sales),
        "top_products": top_products(sales, top_limit),
        "monthly_revenue": monthly_revenue(sales),
        "stock_summary": stock_summary(session.inventory.items, threshold),
    }
