# Overview: Idempotent bootstrap data for a fresh terminal.

from __future__ import annotations

import logging
from decimal import Decimal

from .catalog_service import Catalog

logger = logging.getLogger(__name__)

DEMO_PRODUCTS = (
    {
        "scan_code": "7891000315507",
        "name": "Whole Milk",
        "group": "Dairy",
        "brand": "Ninho",
        "unit_price": Decimal("5.99"),
        "initial_stock": 50,
        "stock_minimum": 10,
    },
    {
        "scan_code": "7891910000197",
        "name": "Rice",
        "group": "Grains",
        "brand": "Tio Joao",
        "unit_price": Decimal("22.90"),
        "initial_stock": 35,
        "stock_minimum": 5,
    },
    {
        "scan_code": "7891149410116",
        "name": "Ground Coffee",
        "group": "Beverages",
        "brand": "Pilao",
        "unit_price": Decimal("15.75"),
        "initial_stock": 28,
        "stock_minimum": 8,
    },
)

DEMO_CLIENTS = (
    {
        "client_id": "2",
        "name": "Maria Silva",
        "document": "123.456.789-00",
        "phone": "(11) 98765-4321",
        "email": "maria@example.com",
        "address": "Rua das Flores, 123",
        "city": "Sao Paulo",
    },
)


def seed_defaults(catalog: Catalog, *, default_client_id: str = "1", demo: bool = False, actor_id: str | None = None) -> dict:
    """
    Create the walk-in client and, with demo=True, the sample catalog.

    Safe to run repeatedly: existing products (by scan code) and clients
    (by id) are left alone.
    """
    created = {"clients": [], "products": []}

    if catalog.get_client(default_client_id) is None:
        created["clients"].append(catalog.ensure_default_client(default_client_id).id)
    if not demo:
        return created

    for data in DEMO_CLIENTS:
        if catalog.get_client(data["client_id"]) is None:
            created["clients"].append(catalog.register_client(**data).id)

    for data in DEMO_PRODUCTS:
        if catalog.find_product_by_scan_code(data["scan_code"]) is not None:
            continue
        product = catalog.register_product(actor_id=actor_id, **data)
        created["products"].append(product.id)

    logger.info("seeded %d client(s), %d product(s)", len(created["clients"]), len(created["products"]))
    return created
