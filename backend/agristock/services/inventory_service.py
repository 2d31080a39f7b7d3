# Overview: Inventory ledger; owns the stock collection and its write-through.

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..models import StockItem, is_low_stock
from ..validation import parse_min_stock, parse_number, parse_text
from .identifier_service import RecordIdAllocator

"""
Inventory invariants:
- Every StockItem.id is unique among current stock items.
- Names are a natural merge key compared case-insensitively (str.lower()),
  with no whitespace or punctuation normalization.
- A merge adds quantity and overwrites price (last write wins); category,
  unit, how_to_use and supplier of the existing item are left untouched.
- Quantity is never clamped. Sale decrements may drive it negative; the
  "enough stock?" check is advisory and lives in sales_service.
- Every mutation persists the full collection before returning.
"""

logger = logging.getLogger(__name__)


def _name_key(name: str) -> str:
    return name.lower()


class InventoryLedger:
    def __init__(self, store, collection: str, ids: RecordIdAllocator | None = None):
        self._store = store
        self.collection = collection
        self._ids = ids or RecordIdAllocator()
        self._items: list[StockItem] = []
        self._name_index: dict[str, StockItem] = {}

    def load(self) -> None:
        self._items = [StockItem.from_dict(r) for r in self._store.load(self.collection)]
        self._ids.observe(item.id for item in self._items)
        self._reindex()
        logger.info("Loaded %d stock items from %s", len(self._items), self.collection)

    def persist(self) -> bool:
        return self._store.save(self.collection, [item.to_dict() for item in self._items])

    def _reindex(self) -> None:
        # First item wins on duplicate names, matching merge lookup order
        self._name_index = {}
        for item in self._items:
            self._name_index.setdefault(_name_key(item.name), item)

    @property
    def items(self) -> list[StockItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str | None) -> StockItem | None:
        if not item_id:
            return None
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def find_by_name(self, name: str) -> StockItem | None:
        return self._name_index.get(_name_key(parse_text(name)))

    def add_or_merge_stock(self, data: Mapping[str, Any]) -> StockItem:
        """
        Add a new product line, or replenish an existing one with the same name.

        Returns the created or updated item.
        """
        name = parse_text(data.get("name"))
        quantity = parse_number(data.get("quantity"))
        price = parse_number(data.get("price"))

        existing = self.find_by_name(name)
        if existing is not None:
            existing.quantity = existing.quantity + quantity
            existing.price = price
            item = existing
            logger.info("Merged %s into stock item %s (quantity now %s)", quantity, item.id, item.quantity)
        else:
            item = StockItem(
                id=self._ids.next_id(),
                name=name,
                category=parse_text(data.get("category")),
                unit=parse_text(data.get("unit")),
                price=price,
                quantity=quantity,
                min_stock=parse_min_stock(data.get("min_stock")),
                how_to_use=parse_text(data.get("how_to_use")),
                supplier=parse_text(data.get("supplier")),
            )
            self._items.append(item)
            self._name_index.setdefault(_name_key(name), item)
            logger.info("Added stock item %s (%s)", item.id, item.name)

        self.persist()
        return item

    def decrement_stock(self, item_id: str | None, amount: Any) -> StockItem | None:
        """
        Subtract amount from an item's quantity.

        Unknown or empty ids are ignored (returns None). No lower bound.
        """
        item = self.get(item_id)
        if item is None:
            logger.debug("Decrement ignored; no stock item %r", item_id)
            return None

        item.quantity = item.quantity - parse_number(amount)
        if item.quantity < 0:
            logger.warning("Stock item %s is now negative (%s)", item.id, item.quantity)

        self.persist()
        return item

    def delete_stock(self, item_id: str | None) -> bool:
        item = self.get(item_id)
        if item is None:
            return False

        self._items = [i for i in self._items if i.id != item.id]
        self._reindex()
        self.persist()
        logger.info("Deleted stock item %s (%s)", item.id, item.name)
        return True

    def list_low_stock(self) -> list[StockItem]:
        return [item for item in self._items if is_low_stock(item)]

    def total_value(self) -> float:
        return sum((item.price * item.quantity for item in self._items), 0.0)

    def total_units(self) -> float:
        return sum((item.quantity for item in self._items), 0.0)
