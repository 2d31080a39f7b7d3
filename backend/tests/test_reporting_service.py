"""
Analytics tests.

All reports are pure projections; these tests build Sale/StockItem values
directly except where a report reads from the session.
"""

from datetime import datetime

import pytest

from agristock.config import Config
from agristock.models import Sale, StockItem
from agristock.services import reporting_service
from agristock.services.reporting_service import (
    ReportError,
    monthly_revenue,
    payment_breakdown,
    revenue_series,
    stock_summary,
    top_products,
)

from tests.conftest import REFERENCE_TIME, sale_input, stock_input


def make_sale(sale_date="2026-10-19", total_price=100.0, **fields) -> Sale:
    data = {
        "id": "1",
        "created_at": "2026-10-19T09:00:00.000Z",
        "sale_date": sale_date,
        "fertilizer_name": "Urea",
        "price": total_price,
        "quantity": 1.0,
        "total_price": total_price,
        "payment_method": "Cash",
    }
    data.update(fields)
    return Sale(**data)


class TestRevenueSeries:

    def test_three_of_seven_days(self):
        sales = [
            make_sale("2026-10-13", 100.0),
            make_sale("2026-10-16", 200.0),
            make_sale("2026-10-19", 300.0),
            make_sale("2026-10-12", 999.0),  # outside the window
        ]

        series = revenue_series(sales, 7, REFERENCE_TIME)

        assert len(series) == 7
        assert [row["date"] for row in series] == [
            "2026-10-13", "2026-10-14", "2026-10-15", "2026-10-16",
            "2026-10-17", "2026-10-18", "2026-10-19",
        ]
        assert [row["revenue"] for row in series] == [100.0, 0.0, 0.0, 200.0, 0.0, 0.0, 300.0]
        assert [row["sale_count"] for row in series] == [1, 0, 0, 1, 0, 0, 1]
        assert series[0]["label"] == "Tue"
        assert series[-1]["label"] == "Mon"

    def test_same_day_sales_accumulate(self):
        series = revenue_series([make_sale(total_price=10.0), make_sale(total_price=15.5)], 1, REFERENCE_TIME)

        assert series == [{"label": "Mon", "date": "2026-10-19", "revenue": 25.5, "sale_count": 2}]

    def test_undated_sales_are_skipped(self):
        series = revenue_series([make_sale(sale_date="")], 7, REFERENCE_TIME)
        assert sum(row["sale_count"] for row in series) == 0

    def test_days_must_be_positive(self):
        with pytest.raises(ReportError):
            revenue_series([], 0, REFERENCE_TIME)


class TestPaymentBreakdown:

    def test_grouped_in_first_seen_order(self):
        rows = payment_breakdown([
            make_sale(payment_method="UPI", total_price=50.0),
            make_sale(payment_method="Cash", total_price=20.0),
            make_sale(payment_method="UPI", total_price=25.0),
            make_sale(payment_method="Credit", total_price=5.0),
        ])

        assert rows == [
            {"method": "UPI", "amount": 75.0},
            {"method": "Cash", "amount": 20.0},
            {"method": "Credit", "amount": 5.0},
        ]


class TestTopProducts:

    def test_tie_keeps_first_seen_order(self):
        rows = top_products([
            make_sale(fertilizer_name="A", total_price=250.0, quantity=1.0),
            make_sale(fertilizer_name="B", total_price=500.0, quantity=4.0),
            make_sale(fertilizer_name="A", total_price=250.0, quantity=2.0),
        ])

        assert [r["name"] for r in rows] == ["A", "B"]
        assert rows[0] == {"name": "A", "count": 2, "revenue": 500.0, "quantity_sold": 3.0}
        assert rows[1] == {"name": "B", "count": 1, "revenue": 500.0, "quantity_sold": 4.0}

    def test_ranked_by_revenue_and_limited(self):
        sales = [make_sale(fertilizer_name=f"P{i}", total_price=float(i)) for i in range(1, 8)]

        rows = top_products(sales, limit=5)

        assert [r["name"] for r in rows] == ["P7", "P6", "P5", "P4", "P3"]

    def test_limit_must_be_positive(self):
        with pytest.raises(ReportError):
            top_products([], limit=0)


class TestMonthlyRevenue:

    def test_groups_by_month_name(self):
        rows = monthly_revenue([
            make_sale("2026-09-02", 10.0),
            make_sale("2026-10-05", 20.0),
            make_sale("2026-09-28", 5.0),
        ])

        assert rows == [
            {"month": "Sep", "revenue": 15.0, "count": 2},
            {"month": "Oct", "revenue": 20.0, "count": 1},
        ]

    def test_known_limitation_same_month_across_years_conflates(self):
        rows = monthly_revenue([make_sale("2025-10-01", 10.0), make_sale("2026-10-01", 30.0)])

        assert rows == [{"month": "Oct", "revenue": 40.0, "count": 2}]


class TestStockSummary:

    def test_fixed_threshold_ignores_item_min_stock(self):
        stock = [
            StockItem(id="1", name="A", price=10.0, quantity=9.0, min_stock=5.0),
            StockItem(id="2", name="B", price=2.0, quantity=20.0, min_stock=50.0),
            StockItem(id="3", name="C", price=1.0, quantity=10.0),
        ]

        summary = stock_summary(stock)

        assert summary["product_count"] == 3
        assert summary["total_units"] == 39.0
        assert summary["total_value"] == 140.0
        assert [i["name"] for i in summary["low_stock"]] == ["A"]

    def test_default_threshold_comes_from_config(self):
        stock = [StockItem(id="1", name="A", price=1.0, quantity=Config.ANALYTICS_LOW_STOCK_THRESHOLD - 1)]

        assert len(stock_summary(stock)["low_stock"]) == 1
        assert stock_summary(stock, threshold=1)["low_stock"] == []
        assert not hasattr(reporting_service, "ANALYTICS_LOW_STOCK_THRESHOLD")

    def test_empty_stock(self):
        assert stock_summary([]) == {"product_count": 0, "total_units": 0.0, "total_value": 0.0, "low_stock": []}


class TestSummaries:

    def test_dashboard(self, session):
        item = session.inventory.add_or_merge_stock(stock_input(name="Urea", price="10", quantity="12", min_stock="10"))
        session.sales.record_sale(sale_input(fertilizer_id=item.id, price="10", quantity="4", sale_date="2026-10-19"),
                                  now=datetime(2026, 10, 19, 9, 0))
        session.sales.record_sale(sale_input(price="20", quantity="1", sale_date="2026-10-18"),
                                  now=datetime(2026, 10, 19, 10, 0))

        summary = reporting_service.dashboard_summary(session, REFERENCE_TIME)

        assert summary["total_revenue"] == 60.0
        assert summary["sale_count"] == 2
        assert summary["stock_value"] == 80.0
        assert summary["product_count"] == 1
        assert summary["low_stock_count"] == 1
        assert summary["average_order_value"] == 30.0
        assert [s["sale_date"] for s in summary["recent_sales"]] == ["2026-10-18", "2026-10-19"]
        assert summary["revenue_series"][-1]["revenue"] == 40.0

    def test_analytics_with_no_data(self, session):
        summary = reporting_service.analytics_summary(session)

        assert summary["average_order_value"] == 0.0
        assert summary["average_customer_value"] == 0.0
        assert summary["average_orders_per_customer"] == 0.0
        assert summary["repeat_customer_count"] == 0
        assert summary["top_products"] == []
        assert summary["stock_summary"]["product_count"] == 0

    def test_analytics_average_customer_value(self, session):
        session.sales.record_sale(sale_input(customer_phone="1", price="100", quantity="1"))
        session.sales.record_sale(sale_input(customer_phone="1", price="50", quantity="1"))
        session.sales.record_sale(sale_input(customer_phone="2", price="30", quantity="1"))

        summary = reporting_service.analytics_summary(session)

        assert summary["customer_count"] == 2
        assert summary["average_customer_value"] == pytest.approx(90.0)
        assert summary["average_order_value"] == pytest.approx(60.0)

    def test_analytics_customer_insights(self, session):
        session.sales.record_sale(sale_input(customer_phone="1"))
        session.sales.record_sale(sale_input(customer_phone="1"))
        session.sales.record_sale(sale_input(customer_phone="2"))

        summary = reporting_service.analytics_summary(session)

        assert summary["repeat_customer_count"] == 1
        assert summary["average_orders_per_customer"] == pytest.approx(1.5)
