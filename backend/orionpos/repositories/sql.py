# Overview: SQLAlchemy-backed repositories; each write commits its own short transaction.

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..domain import CartLine, Client, Product, Sale, StockMovement
from ..errors import StorageFailure
from ..models import (
    CartLineRow,
    ClientRow,
    DocumentSequence,
    ProductRow,
    SaleLineRow,
    SaleRow,
    StockMovementRow,
)
from ..time_utils import utcnow

logger = logging.getLogger(__name__)

SALE_DOCUMENT_TYPE = "sale"
SALE_ID_PREFIX = "S"


class _SqlRepository:
    def __init__(self, session):
        self.session = session

    @contextmanager
    def _storage(self, action: str):
        """
        Convert persistence errors into StorageFailure.

        StaleDataError (a lost version_id race) is an SQLAlchemyError too, so
        optimistic-lock conflicts surface the same way.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("storage failure during %s: %s", action, exc)
            raise StorageFailure(
                f"Storage failure during {action}",
                details={"action": action, "cause": f"{exc.__class__.__name__}: {exc}"},
            ) from exc


class SqlProductRepository(_SqlRepository):
    def get(self, product_id: str) -> Optional[Product]:
        with self._storage("get product"):
            row = self.session.get(ProductRow, product_id)
            return row.to_entity() if row else None

    def get_by_scan_code(self, scan_code: str) -> Optional[Product]:
        if not scan_code:
            return None
        with self._storage("get product by scan code"):
            row = self.session.query(ProductRow).filter_by(scan_code=scan_code).first()
            return row.to_entity() if row else None

    def list_all(self) -> list[Product]:
        with self._storage("list products"):
            rows = self.session.query(ProductRow).order_by(ProductRow.name.asc(), ProductRow.id.asc()).all()
            return [r.to_entity() for r in rows]

    def put(self, product: Product) -> Product:
        with self._storage("put product"):
            row = self.session.get(ProductRow, product.id)
            if row is None:
                row = ProductRow(id=product.id, created_at=product.created_at or utcnow())
                row.apply(product)
                self.session.add(row)
            else:
                if row.version_id != product.version:
                    raise StorageFailure(
                        f"Product {product.id} was modified concurrently",
                        details={
                            "product_id": product.id,
                            "expected_version": product.version,
                            "current_version": row.version_id,
                        },
                    )
                row.apply(product)
            self.session.commit()
            return row.to_entity()

    def delete(self, product_id: str) -> bool:
        with self._storage("delete product"):
            row = self.session.get(ProductRow, product_id)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
            return True


class SqlClientRepository(_SqlRepository):
    def get(self, client_id: str) -> Optional[Client]:
        with self._storage("get client"):
            row = self.session.get(ClientRow, client_id)
            return row.to_entity() if row else None

    def list_all(self) -> list[Client]:
        with self._storage("list clients"):
            rows = self.session.query(ClientRow).order_by(ClientRow.name.asc()).all()
            return [r.to_entity() for r in rows]

    def put(self, client: Client) -> Client:
        with self._storage("put client"):
            row = self.session.get(ClientRow, client.id)
            if row is None:
                row = ClientRow(id=client.id, created_at=client.created_at or utcnow())
                self.session.add(row)
            row.apply(client)
            self.session.commit()
            return row.to_entity()

    def delete(self, client_id: str) -> bool:
        with self._storage("delete client"):
            row = self.session.get(ClientRow, client_id)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
            return True


class SqlSaleRepository(_SqlRepository):
    def get(self, sale_id: str) -> Optional[Sale]:
        with self._storage("get sale"):
            row = self.session.get(SaleRow, sale_id)
            return row.to_entity() if row else None

    def list_all(self) -> list[Sale]:
        return self.list_between(None, None)

    def list_between(self, start: Optional[datetime], end: Optional[datetime]) -> list[Sale]:
        """Sales with start <= created_at < end, oldest first. None leaves a bound open."""
        with self._storage("list sales"):
            q = self.session.query(SaleRow)
            if start is not None:
                q = q.filter(SaleRow.created_at >= start)
            if end is not None:
                q = q.filter(SaleRow.created_at < end)
            rows = q.order_by(SaleRow.created_at.asc(), SaleRow.id.asc()).all()
            return [r.to_entity() for r in rows]

    def add(self, sale: Sale) -> Sale:
        with self._storage("add sale"):
            if self.session.get(SaleRow, sale.id) is not None:
                raise StorageFailure(f"Sale {sale.id} already exists", details={"sale_id": sale.id})
            row = SaleRow(
                id=sale.id,
                created_at=sale.timestamp,
                client_id=sale.client_id,
                client_name=sale.client_name,
                payment_method=sale.payment_method,
                subtotal=sale.subtotal,
                discount_percent=sale.discount_percent,
                discount_amount=sale.discount_amount,
                total=sale.total,
                cashier_id=sale.cashier_id,
            )
            for number, line in enumerate(sale.lines, start=1):
                row.lines.append(
                    SaleLineRow(
                        line_number=number,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        line_subtotal=line.line_subtotal,
                    )
                )
            self.session.add(row)
            self.session.commit()
            return row.to_entity()

    def next_id(self) -> str:
        """
        Allocate the next sale number ("S-000001", ...).

        The counter row is bumped with an UPDATE so a number is consumed even
        when the sale that received it is never written.
        """
        with self._storage("allocate sale id"):
            stmt = (
                update(DocumentSequence)
                .where(DocumentSequence.document_type == SALE_DOCUMENT_TYPE)
                .values(next_number=DocumentSequence.next_number + 1)
            )
            result = self.session.execute(stmt)
            if result.rowcount:
                self.session.flush()
                current = (
                    self.session.query(DocumentSequence.next_number)
                    .filter_by(document_type=SALE_DOCUMENT_TYPE)
                    .scalar()
                )
                number = current - 1
            else:
                seq = DocumentSequence(document_type=SALE_DOCUMENT_TYPE, next_number=2)
                self.session.add(seq)
                try:
                    self.session.flush()
                    number = 1
                except IntegrityError:
                    self.session.rollback()
                    self.session.execute(stmt)
                    self.session.flush()
                    current = (
                        self.session.query(DocumentSequence.next_number)
                        .filter_by(document_type=SALE_DOCUMENT_TYPE)
                        .scalar()
                    )
                    number = current - 1
            self.session.commit()
            return f"{SALE_ID_PREFIX}-{number:06d}"


class SqlStockMovementRepository(_SqlRepository):
    def add(self, movement: StockMovement) -> StockMovement:
        with self._storage("add stock movement"):
            row = StockMovementRow(
                movement_id=movement.id,
                created_at=movement.timestamp,
                product_id=movement.product_id,
                product_name=movement.product_name,
                kind=movement.kind,
                quantity=movement.quantity,
                reason=movement.reason,
                note=movement.note,
                actor_id=movement.actor_id,
                sale_id=movement.sale_id,
            )
            self.session.add(row)
            self.session.commit()
            return row.to_entity()

    def _list(self, action: str, **filters) -> list[StockMovement]:
        with self._storage(action):
            rows = (
                self.session.query(StockMovementRow)
                .filter_by(**filters)
                .order_by(StockMovementRow.id.asc())
                .all()
            )
            return [r.to_entity() for r in rows]

    def list_all(self) -> list[StockMovement]:
        return self._list("list stock movements")

    def list_for_product(self, product_id: str) -> list[StockMovement]:
        return self._list("list product movements", product_id=product_id)

    def list_for_sale(self, sale_id: str) -> list[StockMovement]:
        return self._list("list sale movements", sale_id=sale_id)


class SqlCartRepository(_SqlRepository):
    def load(self) -> list[CartLine]:
        with self._storage("load cart"):
            rows = self.session.query(CartLineRow).order_by(CartLineRow.position.asc()).all()
            return [r.to_entity() for r in rows]

    def save(self, lines: Sequence[CartLine]) -> None:
        with self._storage("save cart"):
            self.session.query(CartLineRow).delete()
            for position, line in enumerate(lines):
                self.session.add(
                    CartLineRow(
                        product_id=line.product_id,
                        position=position,
                        product_name=line.product_name,
                        unit_price_at_add=line.unit_price_at_add,
                        quantity=line.quantity,
                    )
                )
            self.session.commit()

    def clear(self) -> None:
        with self._storage("clear cart"):
            self.session.query(CartLineRow).delete()
            self.session.commit()
