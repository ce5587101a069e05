# Overview: Flask API routes for the working cart; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..errors import PosError, UnknownProduct, ValidationError
from ..services import current_services
from . import internal_error, json_body, pos_error_response


cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _cart_payload(cart, discount_percent=0) -> dict:
    places = current_app.config.get("POS_MONEY_PLACES", 2)
    totals = cart.compute_totals(discount_percent)
    return {
        "lines": [line.to_dict() for line in cart.lines()],
        "item_count": cart.item_count(),
        "is_empty": cart.is_empty(),
        "totals": totals.to_dict(),
        "display_totals": totals.to_dict(places=places),
    }


@cart_bp.get("")
def get_cart_route():
    try:
        return jsonify(_cart_payload(current_services().cart)), 200
    except PosError as e:
        return pos_error_response(e, "Failed to load cart")
    except Exception:
        return internal_error("Failed to load cart")


@cart_bp.delete("")
def clear_cart_route():
    try:
        cart = current_services().cart
        cart.clear()
        return jsonify(_cart_payload(cart)), 200
    except PosError as e:
        return pos_error_response(e, "Failed to clear cart")
    except Exception:
        return internal_error("Failed to clear cart")


@cart_bp.post("/lines")
def add_line_route():
    """
    Add a product to the cart.

    Body: product_id, quantity (default 1). Adding a product already in the
    cart increases that line's quantity.
    """
    data = json_body()
    try:
        product_id = data.get("product_id")
        if not product_id:
            raise ValidationError("product_id required", details={"field": "product_id"})
        cart = current_services().cart
        line = cart.add_line(str(product_id), data.get("quantity", 1))
        return jsonify({"line": line.to_dict(), "cart": _cart_payload(cart)}), 201
    except PosError as e:
        return pos_error_response(e, "Failed to add cart line")
    except Exception:
        return internal_error("Failed to add cart line")


@cart_bp.post("/scan")
def scan_line_route():
    """Body: code, quantity (default 1)."""
    data = json_body()
    try:
        code = data.get("code")
        if not code or not str(code).strip():
            raise ValidationError("code required", details={"field": "code"})
        cart = current_services().cart
        line = cart.add_by_scan_code(str(code), data.get("quantity", 1))
        return jsonify({"line": line.to_dict(), "cart": _cart_payload(cart)}), 201
    except PosError as e:
        return pos_error_response(e, "Failed to add scanned item")
    except Exception:
        return internal_error("Failed to add scanned item")


@cart_bp.patch("/lines/<product_id>")
def update_line_route(product_id: str):
    """Body: quantity. Zero or less removes the line."""
    data = json_body()
    try:
        if "quantity" not in data:
            raise ValidationError("quantity required", details={"field": "quantity"})
        cart = current_services().cart
        line = cart.update_line_quantity(product_id, data["quantity"])
        return jsonify({
            "line": line.to_dict() if line else None,
            "cart": _cart_payload(cart),
        }), 200
    except UnknownProduct as e:
        return pos_error_response(e, "Failed to update cart line", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to update cart line")
    except Exception:
        return internal_error("Failed to update cart line")


@cart_bp.delete("/lines/<product_id>")
def remove_line_route(product_id: str):
    try:
        cart = current_services().cart
        removed = cart.remove_line(product_id)
        return jsonify({"removed": removed, "cart": _cart_payload(cart)}), 200
    except PosError as e:
        return pos_error_response(e, "Failed to remove cart line")
    except Exception:
        return internal_error("Failed to remove cart line")


@cart_bp.get("/totals")
def totals_route():
    discount = request.args.get("discount", "0")
    try:
        places = current_app.config.get("POS_MONEY_PLACES", 2)
        totals = current_services().cart.compute_totals(discount)
        return jsonify({"totals": totals.to_dict(), "display_totals": totals.to_dict(places=places)}), 200
    except PosError as e:
        return pos_error_response(e, "Failed to compute totals")
    except Exception:
        return internal_error("Failed to compute totals")
