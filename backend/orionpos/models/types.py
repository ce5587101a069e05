from __future__ import annotations

from decimal import Decimal

from sqlalchemy.types import String, TypeDecorator


class MoneyType(TypeDecorator):
    """
    Exact decimal amounts stored as text.

    SQLite has no native DECIMAL; a REAL column would turn 3.488 into its
    binary approximation. Values round-trip through str(Decimal).
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)
