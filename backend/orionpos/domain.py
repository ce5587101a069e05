"""
ORION POS domain entities.

These are the records the core services pass around; repositories map them
to and from storage. Money is always Decimal. Sale and StockMovement are
write-once once they reach a repository.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .money import fmt_money
from .time_utils import to_utc_z

MOVEMENT_INBOUND = "inbound"
MOVEMENT_OUTBOUND = "outbound"

REASON_SALE = "sale"
REASON_MANUAL_ADJUSTMENT = "manual-adjustment"
REASON_INITIAL_STOCK = "initial-stock"
REASON_RESTOCK = "restock"


@dataclass
class Product:
    id: str
    name: str
    unit_price: Decimal
    scan_code: str = ""
    group: str = ""
    brand: str = ""
    stock_quantity: int = 0
    stock_minimum: int = 0
    photo_ref: Optional[str] = None
    created_at: Optional[datetime] = None
    # Revision counter; compared-and-swapped by the SQL store on every write
    version: int = 1

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.stock_minimum

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "scan_code": self.scan_code,
            "name": self.name,
            "group": self.group,
            "brand": self.brand,
            "unit_price": str(self.unit_price),
            "stock_quantity": self.stock_quantity,
            "stock_minimum": self.stock_minimum,
            "is_low_stock": self.is_low_stock,
            "photo_ref": self.photo_ref,
            "created_at": to_utc_z(self.created_at),
            "version": self.version,
        }


@dataclass
class Client:
    id: str
    name: str
    document: str = ""
    phone: str = ""
    email: str = ""
    address: str = ""
    city: str = ""
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "document": self.document,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "created_at": to_utc_z(self.created_at),
        }


@dataclass
class CartLine:
    """One pending line; unit_price_at_add is frozen when the product is first added."""

    product_id: str
    product_name: str
    unit_price_at_add: Decimal
    quantity: int

    @property
    def line_subtotal(self) -> Decimal:
        return self.unit_price_at_add * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "unit_price_at_add": str(self.unit_price_at_add),
            "quantity": self.quantity,
            "line_subtotal": str(self.line_subtotal),
        }


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total: Decimal

    def to_dict(self, places: int | None = None) -> dict:
        def fmt(v: Decimal) -> str:
            return fmt_money(v, places) if places is not None else str(v)

        return {
            "subtotal": fmt(self.subtotal),
            "discount_percent": str(self.discount_percent),
            "discount_amount": fmt(self.discount_amount),
            "total": fmt(self.total),
        }


@dataclass(frozen=True)
class SaleLine:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_subtotal: Decimal

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "line_subtotal": str(self.line_subtotal),
        }


@dataclass(frozen=True)
class Sale:
    id: str
    timestamp: datetime
    client_id: str
    client_name: str
    payment_method: str
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    total: Decimal
    cashier_id: Optional[str]
    lines: tuple[SaleLine, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": to_utc_z(self.timestamp),
            "client_id": self.client_id,
            "client_name": self.client_name,
            "payment_method": self.payment_method,
            "lines": [line.to_dict() for line in self.lines],
            "subtotal": str(self.subtotal),
            "discount_percent": str(self.discount_percent),
            "discount_amount": str(self.discount_amount),
            "total": str(self.total),
            "cashier_id": self.cashier_id,
        }


@dataclass(frozen=True)
class StockMovement:
    id: str
    timestamp: datetime
    product_id: str
    product_name: str
    kind: str
    quantity: int
    reason: str
    note: Optional[str] = None
    actor_id: Optional[str] = None
    sale_id: Optional[str] = None

    @property
    def signed_quantity(self) -> int:
        return self.quantity if self.kind == MOVEMENT_INBOUND else -self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": to_utc_z(self.timestamp),
            "product_id": self.product_id,
            "product_name": self.product_name,
            "kind": self.kind,
            "quantity": self.quantity,
            "reason": self.reason,
            "note": self.note,
            "actor_id": self.actor_id,
            "sale_id": self.sale_id,
        }


def generate_id(length: int = 12) -> str:
    """Short random identifier for products, clients and movements."""
    return uuid.uuid4().hex[:length]
