# Overview: Read-only projections over sales and stock: sales report, stock report, receipt.

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..domain import Sale
from ..errors import UnknownSale, ValidationError
from ..money import ZERO, fmt_money
from ..repositories.base import ProductRepository, SaleRepository
from ..time_utils import parse_iso_datetime, to_utc_z


def _parse_bound(value: str | None, field: str, *, end: bool) -> datetime | None:
    if not value:
        return None
    try:
        dt = parse_iso_datetime(value)
    except ValueError as e:
        raise ValidationError(f"{field} must be an ISO-8601 date or datetime", details={field: value}) from e
    # A bare end date covers the whole day
    if end and dt is not None and len(value.strip()) == 10:
        dt = dt + timedelta(days=1)
    return dt


def parse_report_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    """Parse ISO bounds into [start, end). "2026-10-19" as end includes that day."""
    start_dt = _parse_bound(start, "start", end=False)
    end_dt = _parse_bound(end, "end", end=True)
    if start_dt and end_dt and end_dt <= start_dt:
        raise ValidationError("end must be after start", details={"start": start, "end": end})
    return start_dt, end_dt


class ReportService:
    def __init__(
        self,
        products: ProductRepository,
        sales: SaleRepository,
        store_info: dict | None = None,
        places: int = 2,
    ):
        self.products = products
        self.sales = sales
        self.store_info = dict(store_info or {})
        self.places = places

    def _money(self, value: Decimal) -> str:
        return fmt_money(value, self.places)

    def sales_report(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        *,
        client_id: str | None = None,
        payment_method: str | None = None,
        top: int = 10,
    ) -> dict:
        sales = self.sales.list_between(start, end)
        if client_id:
            sales = [s for s in sales if s.client_id == client_id]
        if payment_method:
            sales = [s for s in sales if s.payment_method == payment_method]

        total = sum((s.total for s in sales), ZERO)
        discount = sum((s.discount_amount for s in sales), ZERO)
        count = len(sales)

        by_method: dict[str, dict] = {}
        by_day: dict[str, Decimal] = {}
        products: dict[str, dict] = {}
        for sale in sales:
            bucket = by_method.setdefault(sale.payment_method, {"count": 0, "total": ZERO})
            bucket["count"] += 1
            bucket["total"] += sale.total

            day = sale.timestamp.date().isoformat()
            by_day[day] = by_day.get(day, ZERO) + sale.total

            for line in sale.lines:
                entry = products.setdefault(
                    line.product_id,
                    {"product_id": line.product_id, "name": line.product_name, "quantity": 0, "total": ZERO},
                )
                entry["quantity"] += line.quantity
                entry["total"] += line.line_subtotal

        best_sellers = sorted(products.values(), key=lambda e: (-e["quantity"], e["name"]))[: max(top, 0)]

        return {
            "start": to_utc_z(start),
            "end": to_utc_z(end),
            "totals": {
                "sales": count,
                "total": self._money(total),
                "discount": self._money(discount),
                "average_ticket": self._money(total / count if count else ZERO),
            },
            "by_payment_method": {
                method: {"count": b["count"], "total": self._money(b["total"])}
                for method, b in sorted(by_method.items())
            },
            "by_day": {day: self._money(value) for day, value in sorted(by_day.items())},
            "best_sellers": [
                {
                    "product_id": e["product_id"],
                    "name": e["name"],
                    "quantity": e["quantity"],
                    "total": self._money(e["total"]),
                }
                for e in best_sellers
            ],
        }

    def stock_report(self) -> dict:
        products = self.products.list_all()
        stock_value = sum((p.unit_price * p.stock_quantity for p in products), ZERO)
        low = sorted((p for p in products if p.is_low_stock), key=lambda p: (p.stock_quantity, p.name))
        out = [p for p in products if p.stock_quantity == 0]

        def row(p) -> dict:
            return {
                "product_id": p.id,
                "name": p.name,
                "group": p.group,
                "stock_quantity": p.stock_quantity,
                "stock_minimum": p.stock_minimum,
            }

        return {
            "product_count": len(products),
            "units_in_stock": sum(p.stock_quantity for p in products),
            "stock_value": self._money(stock_value),
            "low_stock": [row(p) for p in low],
            "out_of_stock": [row(p) for p in out],
        }

    def get_sale(self, sale_id: str) -> Sale:
        sale = self.sales.get(sale_id)
        if sale is None:
            raise UnknownSale(sale_id)
        return sale

    def receipt(self, sale_id: str) -> dict:
        """Receipt data for a committed sale, money rounded half-up for display."""
        sale = self.get_sale(sale_id)
        return {
            "store": {
                "name": self.store_info.get("name", ""),
                "document": self.store_info.get("document", ""),
                "phone": self.store_info.get("phone", ""),
                "address": self.store_info.get("address", ""),
            },
            "sale_id": sale.id,
            "timestamp": to_utc_z(sale.timestamp),
            "client": {"id": sale.client_id, "name": sale.client_name},
            "payment_method": sale.payment_method,
            "cashier_id": sale.cashier_id,
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity,
                    "unit_price": self._money(line.unit_price),
                    "line_subtotal": self._money(line.line_subtotal),
                }
                for line in sale.lines
            ],
            "item_count": sum(line.quantity for line in sale.lines),
            "subtotal": self._money(sale.subtotal),
            "discount_percent": str(sale.discount_percent),
            "discount_amount": self._money(sale.discount_amount),
            "total": self._money(sale.total),
        }
