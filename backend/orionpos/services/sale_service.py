# Overview: Sale committer; turns the cart into a write-once Sale plus its stock movements.

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..domain import REASON_SALE, CartLine, Product, Sale, SaleLine
from ..errors import (
    EmptyCart,
    InvalidPaymentMethod,
    NonPositiveTotal,
    OutOfStock,
    PartialCommitFailure,
    UnknownClient,
    UnknownProduct,
)
from ..money import ZERO
from ..repositories.base import CartRepository, ClientRepository, ProductRepository, SaleRepository
from ..time_utils import utcnow
from .cart_service import calculate_totals
from .stock_service import StockLedger

logger = logging.getLogger(__name__)


def _pending(line: CartLine) -> dict:
    return {"product_id": line.product_id, "quantity": line.quantity}


class SaleCommitter:
    """
    The one multi-write operation of the terminal.

    COMMIT ORDER:
    1. Every check (cart, client, payment method, stock, totals) runs before
       anything is written.
    2. The Sale is written, then one outbound movement per line through the
       StockLedger, then the cart is cleared.

    The store has no multi-key commit. Anything that fails after the Sale is
    written raises PartialCommitFailure naming the sale and the lines whose
    movements are missing. The persisted cart is still emptied on a best
    effort basis so a retry cannot record the same sale twice; the error
    details carry what is left to reconcile.

    Explicit `cart_lines` never touch the persisted cart.
    """

    def __init__(
        self,
        products: ProductRepository,
        clients: ClientRepository,
        sales: SaleRepository,
        cart: CartRepository,
        ledger: StockLedger,
        payment_methods: Sequence[str] = (),
    ):
        self.products = products
        self.clients = clients
        self.sales = sales
        self.cart = cart
        self.ledger = ledger
        self.payment_methods = tuple(payment_methods)

    def _validate_payment_method(self, payment_method) -> str:
        method = payment_method.strip() if isinstance(payment_method, str) else ""
        if not method:
            raise InvalidPaymentMethod(payment_method, self.payment_methods)
        if self.payment_methods and method not in self.payment_methods:
            raise InvalidPaymentMethod(method, self.payment_methods)
        return method

    def _validate_stock(self, lines: Sequence[CartLine]) -> dict[str, Product]:
        """Re-read every product; the requested quantity is summed per product."""
        requested: dict[str, int] = {}
        for line in lines:
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
                product = self.products.get(line.product_id)
                if product is None:
                    raise UnknownProduct(line.product_id)
                logger.warning("commit rejected: %s line quantity %r", line.product_id, line.quantity)
                raise OutOfStock(line.product_id, line.quantity, product.stock_quantity, product.name)
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        products: dict[str, Product] = {}
        for product_id, qty in requested.items():
            product = self.products.get(product_id)
            if product is None:
                raise UnknownProduct(product_id)
            if qty > product.stock_quantity:
                logger.warning(
                    "commit rejected: %s requested %d, available %d",
                    product_id,
                    qty,
                    product.stock_quantity,
                )
                raise OutOfStock(product_id, qty, product.stock_quantity, product.name)
            products[product_id] = product
        return products

    def _discard_cart(self, sale_id: str) -> Exception | None:
        """Empty the persisted cart once a sale is recorded; returns the error if the store refused."""
        try:
            self.cart.clear()
            return None
        except Exception as exc:
            logger.warning("sale %s: cart clear failed (%s), saving an empty cart instead", sale_id, exc)
        try:
            self.cart.save([])
            return None
        except Exception as exc:
            logger.error("sale %s: cart still holds the sold lines: %s", sale_id, exc)
            return exc

    def commit(
        self,
        cart_lines: Optional[Iterable[CartLine]] = None,
        *,
        client_id,
        payment_method,
        discount_percent=0,
        cashier_id: str | None = None,
    ) -> Sale:
        """
        Commit the given lines (default: the persisted cart) as a sale.

        Only a commit of the persisted cart clears it. Every line must carry a
        positive integer quantity; anything else is rejected as OutOfStock.

        Raises EmptyCart, UnknownClient, InvalidPaymentMethod, UnknownProduct,
        OutOfStock, InvalidDiscount or NonPositiveTotal without writing
        anything. Raises PartialCommitFailure if the sale was written but a
        later step failed.
        """
        from_cart = cart_lines is None
        lines = list(self.cart.load() if from_cart else cart_lines)
        if not lines:
            raise EmptyCart()

        client = self.clients.get(str(client_id)) if client_id not in (None, "") else None
        if client is None:
            raise UnknownClient(client_id)

        method = self._validate_payment_method(payment_method)
        products = self._validate_stock(lines)

        totals = calculate_totals(lines, discount_percent)
        if totals.total <= ZERO:
            raise NonPositiveTotal(totals.total)

        sale = Sale(
            id=self.sales.next_id(),
            timestamp=utcnow(),
            client_id=client.id,
            client_name=client.name,
            payment_method=method,
            subtotal=totals.subtotal,
            discount_percent=totals.discount_percent,
            discount_amount=totals.discount_amount,
            total=totals.total,
            cashier_id=cashier_id,
            lines=tuple(
                SaleLine(
                    product_id=line.product_id,
                    product_name=products[line.product_id].name,
                    quantity=line.quantity,
                    unit_price=line.unit_price_at_add,
                    line_subtotal=line.line_subtotal,
                )
                for line in lines
            ),
        )
        sale = self.sales.add(sale)

        applied: list[str] = []
        for index, line in enumerate(lines):
            try:
                _, movement = self.ledger.adjust_stock(
                    line.product_id,
                    -line.quantity,
                    reason=REASON_SALE,
                    actor_id=cashier_id,
                    note=f"Sale {sale.id}",
                    sale_id=sale.id,
                )
            except Exception as exc:
                failure = PartialCommitFailure(sale.id, applied, [_pending(rest) for rest in lines[index:]], exc)
                logger.error("%s: %s", failure.message, failure.details)
                if from_cart:
                    self._discard_cart(sale.id)
                raise failure from exc
            applied.append(movement.id)

        if from_cart:
            error = self._discard_cart(sale.id)
            if error is not None:
                failure = PartialCommitFailure(
                    sale.id,
                    applied,
                    [],
                    error,
                    message=f"Sale {sale.id} was recorded but the cart could not be cleared; clear it before the next sale",
                )
                logger.error("%s: %s", failure.message, failure.details)
                raise failure from error

        logger.info(
            "sale %s committed: %d line(s), total %s, payment %s, client %s",
            sale.id,
            len(sale.lines),
            sale.total,
            sale.payment_method,
            sale.client_id,
        )
        return sale
