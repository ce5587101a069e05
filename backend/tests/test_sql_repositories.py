"""
SQL repository tests (SQLite in memory).

Verifies:
- Money survives the round trip as exact Decimal
- Product writes are guarded by the version column
- Sale numbers come from the document sequence and are never reused
- The full commit flow works against the SQL store
"""

import dataclasses
from datetime import timedelta
from decimal import Decimal

import pytest

from orionpos.domain import CartLine, Client, Product, Sale, SaleLine, StockMovement
from orionpos.errors import StorageFailure
from orionpos.models import ProductRow
from orionpos.repositories import (
    SqlCartRepository,
    SqlClientRepository,
    SqlProductRepository,
    SqlSaleRepository,
    SqlStockMovementRepository,
)
from orionpos.time_utils import utcnow
from conftest import MILK_ID, RICE_ID


def _sale(sale_id: str, timestamp=None, total="10.00") -> Sale:
    total = Decimal(total)
    return Sale(
        id=sale_id,
        timestamp=timestamp or utcnow(),
        client_id="1",
        client_name="Final Consumer",
        payment_method="cash",
        subtotal=total,
        discount_percent=Decimal("0"),
        discount_amount=Decimal("0"),
        total=total,
        cashier_id=None,
        lines=(
            SaleLine(product_id="b", product_name="Bread", quantity=2, unit_price=Decimal("2.50"), line_subtotal=Decimal("5.00")),
            SaleLine(product_id="a", product_name="Apple", quantity=1, unit_price=Decimal("5.00"), line_subtotal=Decimal("5.00")),
        ),
    )


class TestProducts:
    def test_decimal_round_trip(self, db_session):
        repo = SqlProductRepository(db_session)
        repo.put(Product(id="p1", name="Odd price", unit_price=Decimal("3.488")))

        db_session.expire_all()
        product = repo.get("p1")

        assert product.unit_price == Decimal("3.488")
        assert isinstance(product.unit_price, Decimal)
        assert product.version == 1
        assert product.created_at is not None

    def test_empty_scan_codes_are_stored_as_null(self, db_session):
        repo = SqlProductRepository(db_session)
        repo.put(Product(id="p1", name="Loose apples", unit_price=Decimal("3.20"), scan_code=""))
        repo.put(Product(id="p2", name="Loose pears", unit_price=Decimal("4.10"), scan_code=""))

        assert db_session.get(ProductRow, "p1").scan_code is None
        assert repo.get("p2").scan_code == ""
        assert repo.get_by_scan_code("") is None
        assert len(repo.list_all()) == 2

    def test_duplicate_scan_code_is_a_storage_failure(self, db_session):
        repo = SqlProductRepository(db_session)
        repo.put(Product(id="p1", name="Milk", unit_price=Decimal("5.99"), scan_code="789"))

        with pytest.raises(StorageFailure):
            repo.put(Product(id="p2", name="Milk copy", unit_price=Decimal("5.99"), scan_code="789"))

        assert repo.get("p2") is None
        assert repo.get_by_scan_code("789").id == "p1"

    def test_version_mismatch_is_rejected(self, db_session):
        repo = SqlProductRepository(db_session)
        repo.put(Product(id="p1", name="Milk", unit_price=Decimal("5.99"), stock_quantity=10))
        stale = repo.get("p1")

        updated = repo.put(dataclasses.replace(stale, stock_quantity=8))
        assert updated.version == 2

        with pytest.raises(StorageFailure) as exc:
            repo.put(dataclasses.replace(stale, stock_quantity=99))

        assert exc.value.details["current_version"] == 2
        assert repo.get("p1").stock_quantity == 8

    def test_delete(self, db_session):
        repo = SqlProductRepository(db_session)
        repo.put(Product(id="p1", name="Milk", unit_price=Decimal("5.99")))

        assert repo.delete("p1") is True
        assert repo.delete("p1") is False
        assert repo.get("p1") is None


class TestClients:
    def test_put_and_update(self, db_session):
        repo = SqlClientRepository(db_session)
        repo.put(Client(id="7", name="Ana"))
        repo.put(Client(id="7", name="Ana Lima", city="Campinas"))

        client = repo.get("7")
        assert client.name == "Ana Lima"
        assert client.city == "Campinas"
        assert [c.id for c in repo.list_all()] == ["7"]


class TestSales:
    def test_add_and_get_keeps_line_order(self, db_session):
        repo = SqlSaleRepository(db_session)
        repo.add(_sale("S-000001"))

        db_session.expire_all()
        sale = repo.get("S-000001")

        assert [line.product_id for line in sale.lines] == ["b", "a"]
        assert sale.lines[0].unit_price == Decimal("2.50")
        assert sale.total == Decimal("10.00")

    def test_sale_ids_are_write_once(self, db_session):
        repo = SqlSaleRepository(db_session)
        repo.add(_sale("S-000001"))

        with pytest.raises(StorageFailure):
            repo.add(_sale("S-000001", total="99.00"))

        assert repo.get("S-000001").total == Decimal("10.00")

    def test_next_id_is_sequential(self, db_session):
        repo = SqlSaleRepository(db_session)
        assert [repo.next_id() for _ in range(3)] == ["S-000001", "S-000002", "S-000003"]

    def test_list_between_is_half_open(self, db_session):
        repo = SqlSaleRepository(db_session)
        base = utcnow().replace(microsecond=0)
        repo.add(_sale("S-000001", base - timedelta(days=1)))
        repo.add(_sale("S-000002", base))
        repo.add(_sale("S-000003", base + timedelta(days=1)))

        assert [s.id for s in repo.list_between(base, base + timedelta(days=1))] == ["S-000002"]
        assert [s.id for s in repo.list_between(None, base)] == ["S-000001"]
        assert [s.id for s in repo.list_all()] == ["S-000001", "S-000002", "S-000003"]

    def test_get_missing(self, db_session):
        assert SqlSaleRepository(db_session).get("S-404") is None


class TestMovements:
    def test_filters_and_order(self, db_session):
        repo = SqlStockMovementRepository(db_session)
        now = utcnow()
        for i, (product_id, sale_id) in enumerate([("p1", None), ("p2", "S-000001"), ("p1", "S-000001")]):
            repo.add(
                StockMovement(
                    id=f"m{i}",
                    timestamp=now,
                    product_id=product_id,
                    product_name=product_id,
                    kind="outbound",
                    quantity=1,
                    reason="sale",
                    sale_id=sale_id,
                )
            )

        assert [m.id for m in repo.list_all()] == ["m0", "m1", "m2"]
        assert [m.id for m in repo.list_for_product("p1")] == ["m0", "m2"]
        assert [m.id for m in repo.list_for_sale("S-000001")] == ["m1", "m2"]


class TestCart:
    def test_save_load_keeps_order(self, db_session):
        repo = SqlCartRepository(db_session)
        lines = [
            CartLine(product_id="z", product_name="Zucchini", unit_price_at_add=Decimal("4.30"), quantity=1),
            CartLine(product_id="a", product_name="Apple", unit_price_at_add=Decimal("0.99"), quantity=6),
        ]
        repo.save(lines)

        assert repo.load() == lines

        repo.save(lines[1:])
        assert repo.load() == lines[1:]

        repo.clear()
        assert repo.load() == []


@pytest.mark.smoke
@pytest.mark.sales
class TestSqlCommit:
    def test_worked_example(self, sql_pos):
        sql_pos.cart.add_line(MILK_ID, 2)
        sql_pos.cart.add_by_scan_code(RICE_ID, 1)

        sale = sql_pos.committer.commit(client_id="1", payment_method="cash", discount_percent="10")

        assert sale.id == "S-000001"
        assert sale.total == Decimal("31.392")
        assert sql_pos.sales.get(sale.id).total == Decimal("31.392")
        assert sql_pos.catalog.get_product(MILK_ID).stock_quantity == 48
        assert sql_pos.catalog.get_product(RICE_ID).stock_quantity == 34
        assert [m.quantity for m in sql_pos.ledger.movements_for_sale(sale.id)] == [2, 1]
        assert sql_pos.cart.is_empty()
        assert sql_pos.reports.receipt(sale.id)["total"] == "31.39"

    def test_seed_movements_are_recorded(self, sql_pos):
        reasons = {m.reason for m in sql_pos.ledger.movements_for_product(MILK_ID)}
        assert reasons == {"initial-stock"}
        assert sql_pos.catalog.get_product(MILK_ID).version == 2
