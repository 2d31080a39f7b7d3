# Overview: The process-wide store session that owns both ledgers.

from __future__ import annotations

import logging
import threading

from flask import current_app

from .identifier_service import RecordIdAllocator
from .inventory_service import InventoryLedger
from .persistence_service import KeyValueStore
from .sales_service import SalesLedger

logger = logging.getLogger(__name__)

SESSION_EXTENSION_KEY = "agristock.session"


class StoreSession:
    """
    In-memory state for one running application.

    Lifecycle: construct -> load() -> mutate through the ledgers (each
    mutation writes through) -> optionally flush(). There is no teardown.

    Request threads that mutate state hold `lock` for the whole operation.
    """

    def __init__(
        self,
        store=None,
        *,
        stock_collection: str = "fertilizer_stock",
        sales_collection: str = "fertilizer_sales",
    ):
        self.lock = threading.RLock()
        self.store = store if store is not None else KeyValueStore()
        self.ids = RecordIdAllocator()
        self.inventory = InventoryLedger(self.store, stock_collection, ids=self.ids)
        self.sales = SalesLedger(self.store, sales_collection, self.inventory, ids=self.ids)

    def load(self) -> "StoreSession":
        self.inventory.load()
        self.sales.load()
        return self

    def flush(self) -> bool:
        """Re-save both collections; True only if both writes succeeded."""
        with self.lock:
            stock_ok = self.inventory.persist()
            sales_ok = self.sales.persist()
        if not (stock_ok and sales_ok):
            logger.warning("Flush incomplete (stock=%s, sales=%s)", stock_ok, sales_ok)
        return stock_ok and sales_ok

    def reset(self) -> None:
        """Drop every record from memory and storage."""
        with self.lock:
            self.store.clear(self.inventory.collection)
            self.store.clear(self.sales.collection)
            self.load()


def init_store_session(app) -> StoreSession:
    session = StoreSession(
        stock_collection=app.config["STOCK_COLLECTION"],
        sales_collection=app.config["SALES_COLLECTION"],
    )
    with app.app_context():
        session.load()
    app.extensions[SESSION_EXTENSION_KEY] = session
    return session


def get_store_session() -> StoreSession:
    return current_app.extensions[SESSION_EXTENSION_KEY]
