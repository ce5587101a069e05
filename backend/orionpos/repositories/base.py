"""Repository interfaces for POS persistence.

One interface per entity type. Every method is required; the core never
probes for optional ones. Implementations wrap their own persistence errors
in StorageFailure.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..domain import CartLine, Client, Product, Sale, StockMovement


class ProductRepository(Protocol):
    """Product master data, keyed by product id."""

    def get(self, product_id: str) -> Optional[Product]:
        ...

    def get_by_scan_code(self, scan_code: str) -> Optional[Product]:
        ...

    def list_all(self) -> list[Product]:
        ...

    def put(self, product: Product) -> Product:
        """Insert or update. Updates compare-and-swap on product.version."""
        ...

    def delete(self, product_id: str) -> bool:
        ...


class ClientRepository(Protocol):
    def get(self, client_id: str) -> Optional[Client]:
        ...

    def list_all(self) -> list[Client]:
        ...

    def put(self, client: Client) -> Client:
        ...

    def delete(self, client_id: str) -> bool:
        ...


class SaleRepository(Protocol):
    """Write-once sale records. There is deliberately no update or delete."""

    def get(self, sale_id: str) -> Optional[Sale]:
        ...

    def list_all(self) -> list[Sale]:
        ...

    def list_between(self, start: Optional[datetime], end: Optional[datetime]) -> list[Sale]:
        ...

    def add(self, sale: Sale) -> Sale:
        ...

    def next_id(self) -> str:
        ...


class StockMovementRepository(Protocol):
    """Append-only stock ledger."""

    def add(self, movement: StockMovement) -> StockMovement:
        ...

    def list_all(self) -> list[StockMovement]:
        ...

    def list_for_product(self, product_id: str) -> list[StockMovement]:
        ...

    def list_for_sale(self, sale_id: str) -> list[StockMovement]:
        ...


class CartRepository(Protocol):
    """The single working cart, stored as an ordered list of lines."""

    def load(self) -> list[CartLine]:
        ...

    def save(self, lines: Sequence[CartLine]) -> None:
        ...

    def clear(self) -> None:
        ...
