"""In-memory repositories.

Drop-in substitutes for the SQL store, used by tests and by callers that
need a throwaway terminal. Stored values are copied on the way in and out so
callers can never mutate the store behind its back.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Optional, Sequence

from ..domain import CartLine, Client, Product, Sale, StockMovement
from ..errors import StorageFailure
from ..time_utils import utcnow


class InMemoryProductRepository:
    def __init__(self, products: Sequence[Product] = ()):
        self._items: dict[str, Product] = {}
        for p in products:
            self.put(p)

    def get(self, product_id: str) -> Optional[Product]:
        p = self._items.get(product_id)
        return copy.deepcopy(p) if p else None

    def get_by_scan_code(self, scan_code: str) -> Optional[Product]:
        if not scan_code:
            return None
        for p in self._items.values():
            if p.scan_code == scan_code:
                return copy.deepcopy(p)
        return None

    def list_all(self) -> list[Product]:
        return [copy.deepcopy(p) for p in sorted(self._items.values(), key=lambda p: (p.name, p.id))]

    def put(self, product: Product) -> Product:
        stored = copy.deepcopy(product)
        current = self._items.get(product.id)
        if current is None:
            stored.version = 1
            stored.created_at = stored.created_at or utcnow()
        else:
            if current.version != product.version:
                raise StorageFailure(
                    f"Product {product.id} was modified concurrently",
                    details={
                        "product_id": product.id,
                        "expected_version": product.version,
                        "current_version": current.version,
                    },
                )
            stored.version = current.version + 1
            stored.created_at = current.created_at
        if stored.scan_code:
            for other in self._items.values():
                if other.id != stored.id and other.scan_code == stored.scan_code:
                    raise StorageFailure(
                        f"Scan code {stored.scan_code!r} is already stored",
                        details={"scan_code": stored.scan_code, "product_id": other.id},
                    )
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def delete(self, product_id: str) -> bool:
        return self._items.pop(product_id, None) is not None


class InMemoryClientRepository:
    def __init__(self, clients: Sequence[Client] = ()):
        self._items: dict[str, Client] = {}
        for c in clients:
            self.put(c)

    def get(self, client_id: str) -> Optional[Client]:
        c = self._items.get(client_id)
        return copy.deepcopy(c) if c else None

    def list_all(self) -> list[Client]:
        return [copy.deepcopy(c) for c in sorted(self._items.values(), key=lambda c: c.name)]

    def put(self, client: Client) -> Client:
        stored = copy.deepcopy(client)
        current = self._items.get(client.id)
        stored.created_at = (current.created_at if current else None) or stored.created_at or utcnow()
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def delete(self, client_id: str) -> bool:
        return self._items.pop(client_id, None) is not None


class InMemorySaleRepository:
    def __init__(self):
        self._items: dict[str, Sale] = {}
        self._counter = 0

    def get(self, sale_id: str) -> Optional[Sale]:
        # Sale is frozen, no copy needed
        return self._items.get(sale_id)

    def list_all(self) -> list[Sale]:
        return self.list_between(None, None)

    def list_between(self, start: Optional[datetime], end: Optional[datetime]) -> list[Sale]:
        sales = [
            s for s in self._items.values()
            if (start is None or s.timestamp >= start) and (end is None or s.timestamp < end)
        ]
        return sorted(sales, key=lambda s: (s.timestamp, s.id))

    def add(self, sale: Sale) -> Sale:
        if sale.id in self._items:
            raise StorageFailure(f"Sale {sale.id} already exists", details={"sale_id": sale.id})
        self._items[sale.id] = sale
        return sale

    def next_id(self) -> str:
        self._counter += 1
        return f"S-{self._counter:06d}"


class InMemoryStockMovementRepository:
    def __init__(self):
        self._items: list[StockMovement] = []

    def add(self, movement: StockMovement) -> StockMovement:
        self._items.append(movement)
        return movement

    def list_all(self) -> list[StockMovement]:
        return list(self._items)

    def list_for_product(self, product_id: str) -> list[StockMovement]:
        return [m for m in self._items if m.product_id == product_id]

    def list_for_sale(self, sale_id: str) -> list[StockMovement]:
        return [m for m in self._items if m.sale_id == sale_id]


class InMemoryCartRepository:
    def __init__(self):
        self._lines: list[CartLine] = []

    def load(self) -> list[CartLine]:
        return copy.deepcopy(self._lines)

    def save(self, lines: Sequence[CartLine]) -> None:
        self._lines = copy.deepcopy(list(lines))

    def clear(self) -> None:
        self._lines = []
