from __future__ import annotations

from ..extensions import db
from ..domain import Client, Product
from .types import MoneyType


class ProductRow(db.Model):
    """
    Product master data.

    SCAN CODE: scan_code is unique when present. Empty codes are stored as
    NULL so that any number of products can exist without one.

    STOCK: stock_quantity is only written through the stock ledger
    (StockLedger.adjust_stock); version_id guards it against lost updates.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("scan_code", name="uq_products_scan_code"),
        db.CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        db.CheckConstraint("stock_minimum >= 0", name="ck_products_minimum_non_negative"),
        db.Index("ix_products_group_name", "product_group", "name"),
    )

    id = db.Column(db.String(64), primary_key=True)
    scan_code = db.Column(db.String(64), nullable=True)

    name = db.Column(db.String(255), nullable=False)
    group_name = db.Column("product_group", db.String(128), nullable=False, default="")
    brand = db.Column(db.String(128), nullable=False, default="")

    unit_price = db.Column(MoneyType(), nullable=False)

    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    stock_minimum = db.Column(db.Integer, nullable=False, default=0)

    photo_ref = db.Column(db.String(512), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<ProductRow id={self.id!r} scan_code={self.scan_code!r} name={self.name!r}>"

    def apply(self, product: Product) -> None:
        self.scan_code = product.scan_code or None
        self.name = product.name
        self.group_name = product.group or ""
        self.brand = product.brand or ""
        self.unit_price = product.unit_price
        self.stock_quantity = product.stock_quantity
        self.stock_minimum = product.stock_minimum
        self.photo_ref = product.photo_ref

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            scan_code=self.scan_code or "",
            name=self.name,
            group=self.group_name or "",
            brand=self.brand or "",
            unit_price=self.unit_price,
            stock_quantity=self.stock_quantity,
            stock_minimum=self.stock_minimum,
            photo_ref=self.photo_ref,
            created_at=self.created_at,
            version=self.version_id,
        )


class ClientRow(db.Model):
    """Client directory entry. Sales keep their own copy of the client name."""
    __tablename__ = "clients"
    __table_args__ = (
        db.Index("ix_clients_name", "name"),
        db.Index("ix_clients_document", "document"),
    )

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    document = db.Column(db.String(32), nullable=False, default="")
    phone = db.Column(db.String(32), nullable=False, default="")
    email = db.Column(db.String(255), nullable=False, default="")
    address = db.Column(db.String(255), nullable=False, default="")
    city = db.Column(db.String(128), nullable=False, default="")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def apply(self, client: Client) -> None:
        self.name = client.name
        self.document = client.document or ""
        self.phone = client.phone or ""
        self.email = client.email or ""
        self.address = client.address or ""
        self.city = client.city or ""

    def to_entity(self) -> Client:
        return Client(
            id=self.id,
            name=self.name,
            document=self.document or "",
            phone=self.phone or "",
            email=self.email or "",
            address=self.address or "",
            city=self.city or "",
            created_at=self.created_at,
        )
