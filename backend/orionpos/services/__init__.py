# Overview: Wires repositories into the catalog, ledger, cart, committer and report services.

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from flask import current_app, g

from ..domain import Client, Product
from ..extensions import db
from ..repositories import (
    InMemoryCartRepository,
    InMemoryClientRepository,
    InMemoryProductRepository,
    InMemorySaleRepository,
    InMemoryStockMovementRepository,
    SqlCartRepository,
    SqlClientRepository,
    SqlProductRepository,
    SqlSaleRepository,
    SqlStockMovementRepository,
)
from ..repositories.base import (
    CartRepository,
    ClientRepository,
    ProductRepository,
    SaleRepository,
    StockMovementRepository,
)
from .cart_service import CartEngine
from .catalog_service import Catalog
from .report_service import ReportService
from .sale_service import SaleCommitter
from .stock_service import StockLedger


@dataclass
class PosServices:
    products: ProductRepository
    clients: ClientRepository
    sales: SaleRepository
    movements: StockMovementRepository
    cart_store: CartRepository
    ledger: StockLedger
    catalog: Catalog
    cart: CartEngine
    committer: SaleCommitter
    reports: ReportService
    default_client_id: str = "1"


def store_info_from_config(config: Mapping) -> dict:
    return {
        "name": config.get("POS_STORE_NAME", ""),
        "document": config.get("POS_STORE_DOCUMENT", ""),
        "phone": config.get("POS_STORE_PHONE", ""),
        "address": config.get("POS_STORE_ADDRESS", ""),
    }


def build_services(
    *,
    products: ProductRepository,
    clients: ClientRepository,
    sales: SaleRepository,
    movements: StockMovementRepository,
    cart: CartRepository,
    config: Mapping | None = None,
) -> PosServices:
    config = config or {}
    ledger = StockLedger(products, movements)
    return PosServices(
        products=products,
        clients=clients,
        sales=sales,
        movements=movements,
        cart_store=cart,
        ledger=ledger,
        catalog=Catalog(products, clients, ledger),
        cart=CartEngine(products, cart),
        committer=SaleCommitter(
            products,
            clients,
            sales,
            cart,
            ledger,
            payment_methods=config.get("POS_PAYMENT_METHODS", ()),
        ),
        reports=ReportService(
            products,
            sales,
            store_info=store_info_from_config(config),
            places=int(config.get("POS_MONEY_PLACES", 2)),
        ),
        default_client_id=str(config.get("POS_DEFAULT_CLIENT_ID", "1")),
    )


def sql_services(session, config: Mapping | None = None) -> PosServices:
    return build_services(
        products=SqlProductRepository(session),
        clients=SqlClientRepository(session),
        sales=SqlSaleRepository(session),
        movements=SqlStockMovementRepository(session),
        cart=SqlCartRepository(session),
        config=config,
    )


def memory_services(
    products: Sequence[Product] = (),
    clients: Sequence[Client] = (),
    config: Mapping | None = None,
) -> PosServices:
    return build_services(
        products=InMemoryProductRepository(products),
        clients=InMemoryClientRepository(clients),
        sales=InMemorySaleRepository(),
        movements=InMemoryStockMovementRepository(),
        cart=InMemoryCartRepository(),
        config=config,
    )


def current_services() -> PosServices:
    """Per-request services over the Flask-SQLAlchemy session."""
    if "pos_services" not in g:
        g.pos_services = sql_services(db.session, current_app.config)
    return g.pos_services
