# Overview: Flask API routes for sales and stock reports.

from flask import Blueprint, jsonify, request

from ..errors import PosError
from ..money import to_quantity
from ..services import current_services
from ..services.report_service import parse_report_range
from . import internal_error, pos_error_response


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/sales")
def sales_report_route():
    """
    Query params: start, end, client_id, payment_method, top (default 10).
    """
    try:
        start, end = parse_report_range(request.args.get("start"), request.args.get("end"))
        report = current_services().reports.sales_report(
            start,
            end,
            client_id=request.args.get("client_id") or None,
            payment_method=request.args.get("payment_method") or None,
            top=to_quantity(request.args.get("top", "10"), "top"),
        )
        return jsonify(report), 200
    except PosError as e:
        return pos_error_response(e, "Failed to build sales report")
    except Exception:
        return internal_error("Failed to build sales report")


@reports_bp.get("/stock")
def stock_report_route():
    try:
        return jsonify(current_services().reports.stock_report()), 200
    except PosError as e:
        return pos_error_response(e, "Failed to build stock report")
    except Exception:
        return internal_error("Failed to build stock report")
