# backend/agristock/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/agristock.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///agristock.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Names of the two persisted collections
    STOCK_COLLECTION = os.environ.get("STOCK_COLLECTION", "fertilizer_stock")
    SALES_COLLECTION = os.environ.get("SALES_COLLECTION", "fertilizer_sales")

    # Analytics uses a fixed threshold, independent of each item's min_stock
    ANALYTICS_LOW_STOCK_THRESHOLD = 10

    RECENT_SALES_LIMIT = 5
    TOP_PRODUCTS_LIMIT = 5
    REVENUE_SERIES_DAYS = 7
