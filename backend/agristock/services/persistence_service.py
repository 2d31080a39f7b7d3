# Overview: Durable key-value storage for the stock and sales collections.

from __future__ import annotations

import json
import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import KeyValueRecord

"""
Persistence contract:
- load(collection) never raises. An absent key, unreadable JSON, or a value
  that is not a list of records all read as an empty collection.
- save(collection, records) never raises. It returns True when the write
  committed and False otherwise; on failure the caller's in-memory state is
  still authoritative for the current session.
- Each save replaces the whole collection (write-through of the full list).
"""

logger = logging.getLogger(__name__)


class KeyValueStore:
    """Named JSON collections backed by the kv_records table."""

    def _get_row(self, collection: str) -> KeyValueRecord | None:
        return db.session.query(KeyValueRecord).filter_by(key=collection).first()

    def load(self, collection: str) -> list[dict]:
        try:
            row = self._get_row(collection)
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("Failed to read collection %s; treating as empty", collection, exc_info=True)
            return []

        if row is None or not row.value:
            return []

        try:
            data = json.loads(row.value)
        except ValueError:
            logger.warning("Collection %s holds malformed JSON; treating as empty", collection)
            return []

        if not isinstance(data, list):
            logger.warning("Collection %s is not a list; treating as empty", collection)
            return []

        return [record for record in data if isinstance(record, dict)]

    def save(self, collection: str, records: Iterable[dict]) -> bool:
        try:
            payload = json.dumps(list(records))
        except (TypeError, ValueError):
            logger.warning("Collection %s is not serializable; not saved", collection, exc_info=True)
            return False

        try:
            row = self._get_row(collection)
            if row is None:
                db.session.add(KeyValueRecord(key=collection, value=payload))
            else:
                row.value = payload
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.warning("Failed to save collection %s; change kept in memory only", collection, exc_info=True)
            return False

        return True

    def clear(self, collection: str) -> bool:
        return self.save(collection, [])
