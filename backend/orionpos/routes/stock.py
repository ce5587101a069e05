# Overview: Flask API routes for manual stock adjustments and the movement ledger.

from flask import Blueprint, jsonify, request

from ..domain import REASON_MANUAL_ADJUSTMENT, REASON_RESTOCK
from ..errors import InvalidAdjustment, PosError, UnknownProduct, ValidationError
from ..money import to_quantity
from ..services import current_services
from . import internal_error, json_body, pos_error_response


stock_bp = Blueprint("stock", __name__, url_prefix="/api/stock")

# "sale" and "initial-stock" movements are only written by the committer and the catalog
MANUAL_REASONS = (REASON_MANUAL_ADJUSTMENT, REASON_RESTOCK)


@stock_bp.post("/adjust")
def adjust_stock_route():
    """
    Body: product_id, delta (signed integer), reason (manual-adjustment or
    restock, default manual-adjustment), note, actor_id.
    """
    data = json_body()
    try:
        product_id = data.get("product_id")
        if not product_id:
            raise ValidationError("product_id required", details={"field": "product_id"})
        if "delta" not in data:
            raise ValidationError("delta required", details={"field": "delta"})
        delta = to_quantity(data["delta"], "delta")
        reason = data.get("reason") or REASON_MANUAL_ADJUSTMENT
        if reason not in MANUAL_REASONS:
            raise InvalidAdjustment(
                f"reason must be one of {', '.join(MANUAL_REASONS)}",
                details={"reason": reason},
            )

        product, movement = current_services().ledger.adjust_stock(
            str(product_id),
            delta,
            reason=reason,
            actor_id=data.get("actor_id"),
            note=data.get("note"),
        )
        return jsonify({"product": product.to_dict(), "movement": movement.to_dict()}), 201
    except PosError as e:
        return pos_error_response(e, "Failed to adjust stock")
    except Exception:
        return internal_error("Failed to adjust stock")


@stock_bp.get("/movements")
def list_movements_route():
    """Query params: product_id, sale_id, limit (default 50, newest first when unfiltered)."""
    try:
        ledger = current_services().ledger
        product_id = request.args.get("product_id")
        sale_id = request.args.get("sale_id")
        if product_id:
            if current_services().products.get(product_id) is None:
                raise UnknownProduct(product_id)
            movements = ledger.movements_for_product(product_id)
        elif sale_id:
            movements = ledger.movements_for_sale(sale_id)
        else:
            limit = to_quantity(request.args.get("limit", "50"), "limit")
            movements = ledger.recent_movements(limit)
        return jsonify({"movements": [m.to_dict() for m in movements], "count": len(movements)}), 200
    except PosError as e:
        return pos_error_response(e, "Failed to list stock movements")
    except Exception:
        return internal_error("Failed to list stock movements")
