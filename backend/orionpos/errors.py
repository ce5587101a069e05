# Overview: Typed error taxonomy for catalog, cart, sale and stock operations.

"""
ORION POS error kinds.

Every kind is recoverable by the operator: routes turn them into a message
plus an aborted operation, never a crashed session. `details` carries the
structured context (product ids, quantities) the UI needs to explain the
failure.
"""

from __future__ import annotations


class PosError(Exception):
    """Base class for all POS domain errors."""

    code = "POS_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, "details": self.details}


class ValidationError(PosError, ValueError):
    """Bad input that never reached the store."""

    code = "VALIDATION_ERROR"


class OutOfStock(PosError):
    code = "OUT_OF_STOCK"

    def __init__(self, product_id: str, requested: int, available: int, product_name: str | None = None):
        label = product_name or product_id
        super().__init__(
            f"Insufficient stock for {label}: requested {requested}, available {available}",
            details={
                "product_id": product_id,
                "product_name": product_name,
                "requested_quantity": requested,
                "available": available,
            },
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class EmptyCart(PosError):
    code = "EMPTY_CART"

    def __init__(self, message: str = "Cart has no items"):
        super().__init__(message)


class UnknownClient(PosError):
    code = "UNKNOWN_CLIENT"

    def __init__(self, client_id):
        super().__init__(f"Client {client_id!r} not found", details={"client_id": client_id})
        self.client_id = client_id


class UnknownProduct(PosError):
    code = "UNKNOWN_PRODUCT"

    def __init__(self, product_id=None, *, scan_code: str | None = None):
        if scan_code is not None:
            message = f"No product with scan code {scan_code!r}"
        else:
            message = f"Product {product_id!r} not found"
        super().__init__(message, details={"product_id": product_id, "scan_code": scan_code})
        self.product_id = product_id
        self.scan_code = scan_code


class UnknownSale(PosError):
    code = "UNKNOWN_SALE"

    def __init__(self, sale_id):
        super().__init__(f"Sale {sale_id!r} not found", details={"sale_id": sale_id})
        self.sale_id = sale_id


class InvalidDiscount(PosError):
    code = "INVALID_DISCOUNT"

    def __init__(self, discount_percent):
        super().__init__(
            "Discount percent must be between 0 and 100",
            details={"discount_percent": str(discount_percent)},
        )


class NonPositiveTotal(PosError):
    code = "NON_POSITIVE_TOTAL"

    def __init__(self, total):
        super().__init__("Sale total must be greater than zero", details={"total": str(total)})


class NegativeStockResult(PosError):
    code = "NEGATIVE_STOCK_RESULT"

    def __init__(self, product_id: str, stock_quantity: int, delta: int):
        super().__init__(
            f"Adjustment of {delta} would leave product {product_id} with negative stock",
            details={"product_id": product_id, "stock_quantity": stock_quantity, "delta": delta},
        )


class InvalidPaymentMethod(PosError):
    code = "INVALID_PAYMENT_METHOD"

    def __init__(self, payment_method, allowed: tuple[str, ...] = ()):
        super().__init__(
            f"Payment method {payment_method!r} is not accepted",
            details={"payment_method": payment_method, "allowed": list(allowed)},
        )


class InvalidAdjustment(ValidationError):
    code = "INVALID_ADJUSTMENT"


class DuplicateScanCode(PosError):
    code = "DUPLICATE_SCAN_CODE"

    def __init__(self, scan_code: str, product_id: str):
        super().__init__(
            f"Scan code {scan_code!r} already belongs to product {product_id}",
            details={"scan_code": scan_code, "product_id": product_id},
        )


class StorageFailure(PosError):
    """Wraps any persistence-layer error."""

    code = "STORAGE_FAILURE"


class PartialCommitFailure(StorageFailure):
    """
    The sale record was persisted but not every stock movement was written.

    The store has no multi-key commit, so this state needs compensating
    stock movements for `pending_lines`.
    """

    code = "PARTIAL_COMMIT"

    def __init__(
        self,
        sale_id: str,
        applied_movement_ids: list[str],
        pending_lines: list[dict],
        cause: BaseException,
        message: str | None = None,
    ):
        super().__init__(
            message or f"Sale {sale_id} was recorded but {len(pending_lines)} stock movement(s) are missing",
            details={
                "sale_id": sale_id,
                "applied_movement_ids": list(applied_movement_ids),
                "pending_lines": list(pending_lines),
                "cause": f"{cause.__class__.__name__}: {cause}",
            },
        )
        self.sale_id = sale_id
        self.applied_movement_ids = list(applied_movement_ids)
        self.pending_lines = list(pending_lines)
        self.cause = cause
