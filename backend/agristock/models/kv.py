from __future__ import annotations

from ..extensions import db


class KeyValueRecord(db.Model):
    """
    One named collection, stored as a JSON document.

    The application keeps exactly two rows (stock and sales); each save
    replaces the whole collection.
    """
    __tablename__ = "kv_records"
    __table_args__ = (
        db.UniqueConstraint("key", name="uq_kv_records_key"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), nullable=False)
    value = db.Column(db.Text, nullable=True)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
