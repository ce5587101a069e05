from __future__ import annotations

from ..extensions import db
from ..domain import StockMovement


class StockMovementRow(db.Model):
    """
    Append-only stock ledger entry.

    APPEND-ONLY: rows are never updated or deleted. product_quantity changes
    are always the signed sum of the movements for the product.

    movement_id is the public identifier; the integer id only orders rows.
    """
    __tablename__ = "stock_movements"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_stock_movements_quantity_positive"),
        db.CheckConstraint("kind IN ('inbound', 'outbound')", name="ck_stock_movements_kind"),
        db.Index("ix_stock_movements_product_created", "product_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    movement_id = db.Column(db.String(64), nullable=False, unique=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)

    product_id = db.Column(db.String(64), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    kind = db.Column(db.String(16), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.String(32), nullable=False)
    note = db.Column(db.String(255), nullable=True)

    actor_id = db.Column(db.String(64), nullable=True)
    # Set for movements written by a sale commit
    sale_id = db.Column(db.String(32), nullable=True, index=True)

    def to_entity(self) -> StockMovement:
        return StockMovement(
            id=self.movement_id,
            timestamp=self.created_at,
            product_id=self.product_id,
            product_name=self.product_name,
            kind=self.kind,
            quantity=self.quantity,
            reason=self.reason,
            note=self.note,
            actor_id=self.actor_id,
            sale_id=self.sale_id,
        )


class DocumentSequence(db.Model):
    """
    Per-type document counters.

    Sale ids are allocated here so that a number is never handed out twice,
    even when the sale that received it failed to persist.
    """
    __tablename__ = "document_sequences"
    __table_args__ = (
        db.UniqueConstraint("document_type", name="uq_doc_sequences_type"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    document_type = db.Column(db.String(32), nullable=False)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())
