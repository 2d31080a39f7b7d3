# Overview: Customer roster derived from sales history; nothing here is persisted.

from __future__ import annotations

from typing import Iterable

from ..models import Customer, Sale
from ..time_utils import parse_sale_date
from ..validation import parse_number, parse_text


def customer_key(sale: Sale) -> str:
    """
    Phone if present, else name.

    Known limitation: two people sharing a phone (or a typo'd phone) merge,
    and two different customers with the same name and no phone merge.
    """
    return sale.customer_phone or sale.customer_name


def _is_later(candidate: str, current: str) -> bool:
    candidate_day = parse_sale_date(candidate)
    current_day = parse_sale_date(current)
    if candidate_day is None or current_day is None:
        return False
    return candidate_day > current_day


def derive_customers(sales: Iterable[Sale]) -> list[Customer]:
    """
    Fold sales into one entry per customer key, sorted by total_amount descending.

    The first sale seen for a key supplies name, phone and address.
    last_purchase only moves forward on a strictly later sale_date.
    """
    customers: dict[str, Customer] = {}

    for sale in sales:
        key = customer_key(sale)
        amount = parse_number(sale.total_price)

        customer = customers.get(key)
        if customer is None:
            customers[key] = Customer(
                name=sale.customer_name,
                phone=sale.customer_phone,
                address=sale.customer_address,
                total_purchases=1,
                total_amount=amount,
                last_purchase=sale.sale_date,
            )
            continue

        customer.total_purchases += 1
        customer.total_amount += amount
        if _is_later(sale.sale_date, customer.last_purchase):
            customer.last_purchase = sale.sale_date

    return sorted(customers.values(), key=lambda c: c.total_amount, reverse=True)


def search_customers(customers: Iterable[Customer], text: str | None) -> list[Customer]:
    needle = parse_text(text).strip().lower()
    if not needle:
        return list(customers)
    return [
        c for c in customers
        if needle in c.name.lower() or needle in c.phone.lower()
    ]
