# backend/orionpos/routes/system.py
"""
System health endpoint.

Checks that the local store answers queries and reports a few counts useful
when debugging a terminal.
"""

import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..models import ProductRow, SaleRow, CartLineRow
from orionpos.time_utils import utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        product_count = db.session.query(ProductRow).count()
        sale_count = db.session.query(SaleRow).count()
        cart_lines = db.session.query(CartLineRow).count()

        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "products": product_count,
                "sales": sale_count,
                "cart_lines": cart_lines,
            },
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: store reachable
    - 503: store unreachable
    """
    database_health = check_database_health()
    healthy = database_health["status"] == "healthy"
    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": utcnow().isoformat() + "Z",
        "store_name": current_app.config.get("POS_STORE_NAME"),
        "checks": {"database": database_health},
    }
    return response, 200 if healthy else 503
