from __future__ import annotations

from ..extensions import db
from ..domain import CartLine, Sale, SaleLine
from .types import MoneyType


class SaleRow(db.Model):
    """
    Committed sale (write-once).

    The id is the human-readable document number (e.g. "S-000042") allocated
    from document_sequences. Client and product names are denormalized so the
    record stays readable after catalog edits.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_created_at", "created_at"),
        db.Index("ix_sales_payment_method", "payment_method"),
    )

    id = db.Column(db.String(32), primary_key=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False)

    client_id = db.Column(db.String(64), nullable=False, index=True)
    client_name = db.Column(db.String(255), nullable=False)
    payment_method = db.Column(db.String(32), nullable=False)

    subtotal = db.Column(MoneyType(), nullable=False)
    discount_percent = db.Column(MoneyType(), nullable=False)
    discount_amount = db.Column(MoneyType(), nullable=False)
    total = db.Column(MoneyType(), nullable=False)

    cashier_id = db.Column(db.String(64), nullable=True)

    lines = db.relationship(
        "SaleLineRow",
        backref="sale",
        lazy="selectin",
        order_by="SaleLineRow.line_number",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<SaleRow id={self.id!r} total={self.total} client_id={self.client_id!r}>"

    def to_entity(self) -> Sale:
        return Sale(
            id=self.id,
            timestamp=self.created_at,
            client_id=self.client_id,
            client_name=self.client_name,
            payment_method=self.payment_method,
            subtotal=self.subtotal,
            discount_percent=self.discount_percent,
            discount_amount=self.discount_amount,
            total=self.total,
            cashier_id=self.cashier_id,
            lines=tuple(line.to_entity() for line in self.lines),
        )


class SaleLineRow(db.Model):
    """Line snapshot of a committed sale. product_id is not a foreign key: products may be deleted later."""
    __tablename__ = "sale_lines"
    __table_args__ = (
        db.UniqueConstraint("sale_id", "line_number", name="uq_sale_lines_sale_line"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sale_id = db.Column(db.String(32), db.ForeignKey("sales.id"), nullable=False, index=True)
    line_number = db.Column(db.Integer, nullable=False)

    product_id = db.Column(db.String(64), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(MoneyType(), nullable=False)
    line_subtotal = db.Column(MoneyType(), nullable=False)

    def to_entity(self) -> SaleLine:
        return SaleLine(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            unit_price=self.unit_price,
            line_subtotal=self.line_subtotal,
        )


class CartLineRow(db.Model):
    """
    Persisted working cart of the single checkout session.

    One row per product; position keeps insertion order across reloads.
    """
    __tablename__ = "cart_lines"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_cart_lines_quantity_positive"),
    )

    product_id = db.Column(db.String(64), primary_key=True)
    position = db.Column(db.Integer, nullable=False)
    product_name = db.Column(db.String(255), nullable=False)
    unit_price_at_add = db.Column(MoneyType(), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    def to_entity(self) -> CartLine:
        return CartLine(
            product_id=self.product_id,
            product_name=self.product_name,
            unit_price_at_add=self.unit_price_at_add,
            quantity=self.quantity,
        )
