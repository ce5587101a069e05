from .base import (
    CartRepository,
    ClientRepository,
    ProductRepository,
    SaleRepository,
    StockMovementRepository,
)
from .memory import (
    InMemoryCartRepository,
    InMemoryClientRepository,
    InMemoryProductRepository,
    InMemorySaleRepository,
    InMemoryStockMovementRepository,
)
from .sql import (
    SqlCartRepository,
    SqlClientRepository,
    SqlProductRepository,
    SqlSaleRepository,
    SqlStockMovementRepository,
)

__all__ = [
    'ProductRepository', 'ClientRepository', 'SaleRepository',
    'StockMovementRepository', 'CartRepository',
    'InMemoryProductRepository', 'InMemoryClientRepository', 'InMemorySaleRepository',
    'InMemoryStockMovementRepository', 'InMemoryCartRepository',
    'SqlProductRepository', 'SqlClientRepository', 'SqlSaleRepository',
    'SqlStockMovementRepository', 'SqlCartRepository',
]
