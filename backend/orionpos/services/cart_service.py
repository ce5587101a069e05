# Overview: Cart engine; the working set of lines for the sale in progress and its totals.

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from ..domain import CartLine, Product, Totals
from ..errors import InvalidDiscount, OutOfStock, UnknownProduct, ValidationError
from ..money import HUNDRED, ZERO, to_decimal, to_quantity
from ..repositories.base import CartRepository, ProductRepository
from .catalog_service import find_product_by_scan_code

logger = logging.getLogger(__name__)


def calculate_totals(lines: Iterable[CartLine], discount_percent=0) -> Totals:
    """
    subtotal = sum of line subtotals
    discount_amount = subtotal * discount_percent / 100
    total = subtotal - discount_amount

    Values are exact Decimals; rounding is left to display code.
    Shared by the cart and the sale committer so both compute the same numbers.
    """
    try:
        pct = to_decimal(discount_percent, "discount_percent")
    except ValidationError as e:
        raise InvalidDiscount(discount_percent) from e
    if pct < ZERO or pct > HUNDRED:
        raise InvalidDiscount(pct)

    subtotal = sum((line.line_subtotal for line in lines), ZERO)
    discount_amount = subtotal * pct / HUNDRED
    return Totals(
        subtotal=subtotal,
        discount_percent=pct,
        discount_amount=discount_amount,
        total=subtotal - discount_amount,
    )


class CartEngine:
    """
    Holds the pending lines of the sale in progress.

    Stock checks here are advisory: stock is re-read from the product
    repository on every mutation, but it can still change before checkout,
    so SaleCommitter validates again. Prices are the opposite: the unit price
    is captured when a product first enters the cart and never re-read.

    A rejected mutation leaves the persisted cart untouched.
    """

    def __init__(self, products: ProductRepository, cart: CartRepository):
        self.products = products
        self.cart = cart

    def _current_product(self, product_id: str) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise UnknownProduct(product_id)
        return product

    def add_line(self, product: Union[Product, str], quantity=1) -> CartLine:
        product_id = product.id if isinstance(product, Product) else str(product)
        qty = to_quantity(quantity)

        current = self._current_product(product_id)
        if qty <= 0:
            raise OutOfStock(product_id, qty, current.stock_quantity, current.name)

        lines = self.cart.load()
        index = next((i for i, line in enumerate(lines) if line.product_id == product_id), None)

        requested = qty if index is None else lines[index].quantity + qty
        if requested > current.stock_quantity:
            logger.debug("add_line rejected: %s requested %d, available %d", product_id, requested, current.stock_quantity)
            raise OutOfStock(product_id, requested, current.stock_quantity, current.name)

        if index is None:
            line = CartLine(
                product_id=product_id,
                product_name=current.name,
                unit_price_at_add=current.unit_price,
                quantity=qty,
            )
            lines.append(line)
        else:
            existing = lines[index]
            line = CartLine(
                product_id=existing.product_id,
                product_name=existing.product_name,
                unit_price_at_add=existing.unit_price_at_add,
                quantity=requested,
            )
            lines[index] = line

        self.cart.save(lines)
        return line

    def add_by_scan_code(self, code: str, quantity=1) -> CartLine:
        product = find_product_by_scan_code(self.products, code)
        if product is None:
            raise UnknownProduct(scan_code=(code or "").strip())
        return self.add_line(product, quantity)

    def update_line_quantity(self, product_id: str, quantity) -> Optional[CartLine]:
        """Set a line's quantity. Zero or less removes the line; a missing line is a no-op."""
        qty = to_quantity(quantity)
        if qty <= 0:
            self.remove_line(product_id)
            return None

        lines = self.cart.load()
        index = next((i for i, line in enumerate(lines) if line.product_id == product_id), None)
        if index is None:
            return None

        current = self._current_product(product_id)
        if qty > current.stock_quantity:
            raise OutOfStock(product_id, qty, current.stock_quantity, current.name)

        existing = lines[index]
        line = CartLine(
            product_id=existing.product_id,
            product_name=existing.product_name,
            unit_price_at_add=existing.unit_price_at_add,
            quantity=qty,
        )
        lines[index] = line
        self.cart.save(lines)
        return line

    def remove_line(self, product_id: str) -> bool:
        lines = self.cart.load()
        kept = [line for line in lines if line.product_id != product_id]
        if len(kept) == len(lines):
            return False
        self.cart.save(kept)
        return True

    def compute_totals(self, discount_percent=0) -> Totals:
        return calculate_totals(self.cart.load(), discount_percent)

    def clear(self) -> None:
        self.cart.clear()

    # Read accessors

    def lines(self) -> list[CartLine]:
        return self.cart.load()

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.cart.load() if line.product_id == product_id), None)

    def is_empty(self) -> bool:
        return not self.cart.load()

    def item_count(self) -> int:
        return sum(line.quantity for line in self.cart.load())
