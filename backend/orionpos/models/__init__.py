from .catalog import ProductRow, ClientRow
from .sales import SaleRow, SaleLineRow, CartLineRow
from .inventory import StockMovementRow, DocumentSequence

__all__ = [
    'ProductRow', 'ClientRow',
    'SaleRow', 'SaleLineRow', 'CartLineRow',
    'StockMovementRow', 'DocumentSequence',
]
