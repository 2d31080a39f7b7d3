from .kv import KeyValueRecord
from .records import StockItem, Sale, Customer, compute_total, is_low_stock

__all__ = [
    'KeyValueRecord',
    'StockItem', 'Sale', 'Customer',
    'compute_total', 'is_low_stock',
]
