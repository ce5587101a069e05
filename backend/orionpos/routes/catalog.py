# Overview: Flask API routes for products and clients; parses input and returns JSON responses.

from flask import Blueprint, jsonify, request

from ..errors import PosError, UnknownClient, UnknownProduct, ValidationError
from ..services import current_services
from . import internal_error, json_body, pos_error_response


products_bp = Blueprint("products", __name__, url_prefix="/api/products")
clients_bp = Blueprint("clients", __name__, url_prefix="/api/clients")


@products_bp.get("")
def list_products_route():
    group = request.args.get("group") or None
    try:
        catalog = current_services().catalog
        products = catalog.list_products(group=group)
        return jsonify({
            "products": [p.to_dict() for p in products],
            "count": len(products),
            "groups": catalog.list_groups(),
        }), 200
    except PosError as e:
        return pos_error_response(e, "Failed to list products")
    except Exception:
        return internal_error("Failed to list products")


@products_bp.post("")
def create_product_route():
    """
    Register a product.

    Body: name, unit_price, scan_code?, group?, brand?, stock_minimum?,
    initial_stock?, photo_ref?, actor_id?
    """
    data = json_body()
    try:
        if "unit_price" not in data:
            raise ValidationError("unit_price required", details={"field": "unit_price"})
        product = current_services().catalog.register_product(
            name=data.get("name"),
            unit_price=data.get("unit_price"),
            scan_code=data.get("scan_code") or "",
            group=data.get("group") or "",
            brand=data.get("brand") or "",
            stock_minimum=data.get("stock_minimum", 0),
            initial_stock=data.get("initial_stock", 0),
            photo_ref=data.get("photo_ref"),
            actor_id=data.get("actor_id"),
        )
        return jsonify({"product": product.to_dict()}), 201
    except PosError as e:
        return pos_error_response(e, "Failed to create product")
    except Exception:
        return internal_error("Failed to create product")


@products_bp.get("/scan/<code>")
def scan_product_route(code: str):
    try:
        product = current_services().catalog.find_product_by_scan_code(code)
        if product is None:
            raise UnknownProduct(scan_code=code.strip())
        return jsonify({"product": product.to_dict()}), 200
    except UnknownProduct as e:
        return pos_error_response(e, "Failed to resolve scan code", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to resolve scan code")
    except Exception:
        return internal_error("Failed to resolve scan code")


@products_bp.get("/<product_id>")
def get_product_route(product_id: str):
    try:
        product = current_services().catalog.require_product(product_id)
        return jsonify({"product": product.to_dict()}), 200
    except UnknownProduct as e:
        return pos_error_response(e, "Failed to load product", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to load product")
    except Exception:
        return internal_error("Failed to load product")


@products_bp.patch("/<product_id>")
def update_product_price_route(product_id: str):
    """Only the price is editable here; stock changes go through /api/stock/adjust."""
    data = json_body()
    try:
        if "unit_price" not in data:
            raise ValidationError("unit_price required", details={"field": "unit_price"})
        product = current_services().catalog.update_price(product_id, data["unit_price"])
        return jsonify({"product": product.to_dict()}), 200
    except UnknownProduct as e:
        return pos_error_response(e, "Failed to update product", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to update product")
    except Exception:
        return internal_error("Failed to update product")


@clients_bp.get("")
def list_clients_route():
    try:
        clients = current_services().catalog.list_clients()
        return jsonify({"clients": [c.to_dict() for c in clients], "count": len(clients)}), 200
    except PosError as e:
        return pos_error_response(e, "Failed to list clients")
    except Exception:
        return internal_error("Failed to list clients")


@clients_bp.post("")
def create_client_route():
    data = json_body()
    try:
        client = current_services().catalog.register_client(
            name=data.get("name"),
            document=data.get("document") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
            address=data.get("address") or "",
            city=data.get("city") or "",
        )
        return jsonify({"client": client.to_dict()}), 201
    except PosError as e:
        return pos_error_response(e, "Failed to create client")
    except Exception:
        return internal_error("Failed to create client")


@clients_bp.get("/<client_id>")
def get_client_route(client_id: str):
    try:
        client = current_services().catalog.require_client(client_id)
        return jsonify({"client": client.to_dict()}), 200
    except UnknownClient as e:
        return pos_error_response(e, "Failed to load client", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to load client")
    except Exception:
        return internal_error("Failed to load client")
