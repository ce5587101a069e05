# Overview: Product catalog and client directory lookups and registration.

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from ..domain import Client, Product, REASON_INITIAL_STOCK, generate_id
from ..errors import DuplicateScanCode, UnknownClient, UnknownProduct, ValidationError
from ..money import ZERO, to_decimal, to_quantity
from ..repositories.base import ClientRepository, ProductRepository
from .stock_service import StockLedger

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "Final Consumer"


def normalize_scan_code(code) -> str:
    if code is None:
        return ""
    return str(code).strip()


def find_product_by_scan_code(products: ProductRepository, code) -> Optional[Product]:
    """Exact match on the stripped code. An empty code never matches."""
    code = normalize_scan_code(code)
    if not code:
        return None
    return products.get_by_scan_code(code)


class Catalog:
    def __init__(self, products: ProductRepository, clients: ClientRepository, ledger: StockLedger):
        self.products = products
        self.clients = clients
        self.ledger = ledger

    # Products

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.products.get(product_id)

    def require_product(self, product_id: str) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise UnknownProduct(product_id)
        return product

    def find_product_by_scan_code(self, code) -> Optional[Product]:
        return find_product_by_scan_code(self.products, code)

    def list_products(self, group: str | None = None) -> list[Product]:
        products = self.products.list_all()
        if group:
            products = [p for p in products if p.group == group]
        return products

    def list_groups(self) -> list[str]:
        return sorted({p.group for p in self.products.list_all() if p.group})

    def register_product(
        self,
        name: str,
        unit_price,
        scan_code: str = "",
        group: str = "",
        brand: str = "",
        stock_minimum=0,
        initial_stock=0,
        photo_ref: str | None = None,
        actor_id: str | None = None,
    ) -> Product:
        """
        Create a product.

        The id is the scan code when one is given, otherwise a generated short
        id. Opening stock is not written on the product directly; it goes
        through the ledger as an "initial-stock" movement.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Product name is required", details={"name": name})

        price = to_decimal(unit_price, "unit_price")
        if price < ZERO:
            raise ValidationError("unit_price must be >= 0", details={"unit_price": str(price)})

        minimum = to_quantity(stock_minimum, "stock_minimum")
        if minimum < 0:
            raise ValidationError("stock_minimum must be >= 0", details={"stock_minimum": minimum})

        opening = to_quantity(initial_stock, "initial_stock")
        if opening < 0:
            raise ValidationError("initial_stock must be >= 0", details={"initial_stock": opening})

        code = normalize_scan_code(scan_code)
        if code:
            existing = self.products.get_by_scan_code(code)
            if existing is not None:
                raise DuplicateScanCode(code, existing.id)
            product_id = code
            if self.products.get(product_id) is not None:
                raise DuplicateScanCode(code, product_id)
        else:
            product_id = generate_id()

        product = self.products.put(
            Product(
                id=product_id,
                scan_code=code,
                name=name,
                group=(group or "").strip(),
                brand=(brand or "").strip(),
                unit_price=price,
                stock_quantity=0,
                stock_minimum=minimum,
                photo_ref=photo_ref or None,
            )
        )
        logger.info("registered product %s (%s) at %s", product.id, product.name, product.unit_price)

        if opening > 0:
            product, _ = self.ledger.adjust_stock(
                product.id,
                opening,
                reason=REASON_INITIAL_STOCK,
                actor_id=actor_id,
                note="Initial stock",
            )
        return product

    def update_price(self, product_id: str, unit_price) -> Product:
        """Change the catalog price. Lines already in a cart keep their snapshot."""
        price = to_decimal(unit_price, "unit_price")
        if price < ZERO:
            raise ValidationError("unit_price must be >= 0", details={"unit_price": str(price)})
        product = self.require_product(product_id)
        updated = self.products.put(dataclasses.replace(product, unit_price=price))
        logger.info("price of %s changed %s -> %s", product_id, product.unit_price, price)
        return updated

    # Clients

    def get_client(self, client_id: str) -> Optional[Client]:
        if client_id is None:
            return None
        return self.clients.get(str(client_id))

    def require_client(self, client_id: str) -> Client:
        client = self.get_client(client_id)
        if client is None:
            raise UnknownClient(client_id)
        return client

    def list_clients(self) -> list[Client]:
        return self.clients.list_all()

    def register_client(
        self,
        name: str,
        document: str = "",
        phone: str = "",
        email: str = "",
        address: str = "",
        city: str = "",
        client_id: str | None = None,
    ) -> Client:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Client name is required", details={"name": name})
        return self.clients.put(
            Client(
                id=client_id or generate_id(),
                name=name,
                document=(document or "").strip(),
                phone=(phone or "").strip(),
                email=(email or "").strip(),
                address=(address or "").strip(),
                city=(city or "").strip(),
            )
        )

    def ensure_default_client(self, client_id: str = "1") -> Client:
        """Idempotently create the walk-in client used when none is chosen."""
        existing = self.clients.get(client_id)
        if existing is not None:
            return existing
        return self.register_client(DEFAULT_CLIENT_NAME, client_id=client_id)
