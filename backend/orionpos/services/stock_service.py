# Overview: Stock ledger; the only writer of Product.stock_quantity and the only creator of stock movements.

from __future__ import annotations

import dataclasses
import logging

from ..domain import (
    MOVEMENT_INBOUND,
    MOVEMENT_OUTBOUND,
    Product,
    StockMovement,
    generate_id,
)
from ..errors import InvalidAdjustment, NegativeStockResult, StorageFailure, UnknownProduct
from ..repositories.base import ProductRepository, StockMovementRepository
from ..time_utils import utcnow

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Adjusts product stock and records every change as a StockMovement.

    Write order is product first, then movement. If the movement cannot be
    written the product write is reverted with a second compare-and-swap so
    stock never changes without a ledger entry.
    """

    def __init__(self, products: ProductRepository, movements: StockMovementRepository):
        self.products = products
        self.movements = movements

    def adjust_stock(
        self,
        product_id: str,
        delta: int,
        reason: str,
        actor_id: str | None,
        note: str | None = None,
        sale_id: str | None = None,
    ) -> tuple[Product, StockMovement]:
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise InvalidAdjustment("Stock delta must be an integer", details={"delta": repr(delta)})
        if delta == 0:
            raise InvalidAdjustment("Stock delta must not be zero", details={"delta": 0})
        if not reason:
            raise InvalidAdjustment("A reason is required for stock adjustments", details={"reason": reason})

        product = self.products.get(product_id)
        if product is None:
            raise UnknownProduct(product_id)

        new_quantity = product.stock_quantity + delta
        if new_quantity < 0:
            raise NegativeStockResult(product_id, product.stock_quantity, delta)

        updated = self.products.put(dataclasses.replace(product, stock_quantity=new_quantity))

        movement = StockMovement(
            id=generate_id(),
            timestamp=utcnow(),
            product_id=product.id,
            product_name=product.name,
            kind=MOVEMENT_INBOUND if delta > 0 else MOVEMENT_OUTBOUND,
            quantity=abs(delta),
            reason=reason,
            note=note,
            actor_id=actor_id,
            sale_id=sale_id,
        )
        try:
            movement = self.movements.add(movement)
        except StorageFailure:
            self._revert(updated, product.stock_quantity)
            raise

        logger.info(
            "stock %s %s x%d (%s) -> %d [movement=%s sale=%s actor=%s]",
            movement.kind,
            product.id,
            movement.quantity,
            reason,
            updated.stock_quantity,
            movement.id,
            sale_id,
            actor_id,
        )
        return updated, movement

    def _revert(self, updated: Product, previous_quantity: int) -> None:
        try:
            self.products.put(dataclasses.replace(updated, stock_quantity=previous_quantity))
        except StorageFailure:
            logger.error(
                "could not revert stock of %s to %d after a failed movement write; stock is %d with no ledger entry",
                updated.id,
                previous_quantity,
                updated.stock_quantity,
            )
            return
        logger.warning("reverted stock of %s to %d after a failed movement write", updated.id, previous_quantity)

    def movements_for_product(self, product_id: str) -> list[StockMovement]:
        return self.movements.list_for_product(product_id)

    def movements_for_sale(self, sale_id: str) -> list[StockMovement]:
        return self.movements.list_for_sale(sale_id)

    def recent_movements(self, limit: int = 50) -> list[StockMovement]:
        """Newest first."""
        if limit <= 0:
            return []
        return list(reversed(self.movements.list_all()))[:limit]
