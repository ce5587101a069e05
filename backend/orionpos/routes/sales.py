# Overview: Flask API routes for committing and reading sales; parses input and returns JSON responses.

from flask import Blueprint, jsonify, request

from ..errors import PosError, UnknownSale
from ..services import current_services
from ..services.report_service import parse_report_range
from . import internal_error, json_body, pos_error_response


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def commit_sale_route():
    """
    Commit the current cart as a sale.

    Body: payment_method, client_id (default: the walk-in client),
    discount_percent (default 0), cashier_id.

    A PartialCommitFailure (sale written, stock movements incomplete) comes
    back as 500 with the sale id and pending lines in details.
    """
    data = json_body()
    try:
        services = current_services()
        sale = services.committer.commit(
            client_id=data.get("client_id") or services.default_client_id,
            payment_method=data.get("payment_method"),
            discount_percent=data.get("discount_percent", 0),
            cashier_id=data.get("cashier_id"),
        )
        return jsonify({"sale": sale.to_dict(), "receipt": services.reports.receipt(sale.id)}), 201
    except PosError as e:
        return pos_error_response(e, "Failed to commit sale")
    except Exception:
        return internal_error("Failed to commit sale")


@sales_bp.get("")
def list_sales_route():
    """Query params: start, end (ISO-8601; a bare end date includes that day)."""
    try:
        start, end = parse_report_range(request.args.get("start"), request.args.get("end"))
        sales = current_services().sales.list_between(start, end)
        return jsonify({"sales": [s.to_dict() for s in sales], "count": len(sales)}), 200
    except PosError as e:
        return pos_error_response(e, "Failed to list sales")
    except Exception:
        return internal_error("Failed to list sales")


@sales_bp.get("/<sale_id>")
def get_sale_route(sale_id: str):
    try:
        services = current_services()
        sale = services.reports.get_sale(sale_id)
        movements = services.ledger.movements_for_sale(sale.id)
        return jsonify({"sale": sale.to_dict(), "movements": [m.to_dict() for m in movements]}), 200
    except UnknownSale as e:
        return pos_error_response(e, "Failed to load sale", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to load sale")
    except Exception:
        return internal_error("Failed to load sale")


@sales_bp.get("/<sale_id>/receipt")
def get_receipt_route(sale_id: str):
    try:
        return jsonify({"receipt": current_services().reports.receipt(sale_id)}), 200
    except UnknownSale as e:
        return pos_error_response(e, "Failed to build receipt", status=404)
    except PosError as e:
        return pos_error_response(e, "Failed to build receipt")
    except Exception:
        return internal_error("Failed to build receipt")
