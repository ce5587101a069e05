"""
CLI command tests.

Runs the Flask CLI groups inside the per-test app context so they see the
same in-memory database as the fixtures.
"""

from conftest import COFFEE_ID, MILK_ID, RICE_ID


def test_init_with_demo_data(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init", "--demo"])

    assert result.exit_code == 0, result.output
    assert "PASS Clients created: 1, 2" in result.output
    assert MILK_ID in result.output
    assert "DONE ORION POS initialized" in result.output

    again = runner.invoke(args=["system", "init", "--demo"])
    assert again.exit_code == 0
    assert "PASS Products created: -" in again.output


def test_stock_adjust(app, seeded):
    result = app.test_cli_runner().invoke(
        args=["stock", "adjust", MILK_ID, "--delta=-5", "--note", "Broken pack", "--actor", "mgr"]
    )

    assert result.exit_code == 0, result.output
    assert "PASS outbound 5 x Whole Milk" in result.output
    assert "stock now 45" in result.output
    movement = seeded.ledger.recent_movements(1)[0]
    assert movement.note == "Broken pack"
    assert movement.actor_id == "mgr"


def test_stock_adjust_negative_result(app, seeded):
    result = app.test_cli_runner().invoke(args=["stock", "adjust", COFFEE_ID, "--delta=-100"])

    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert seeded.catalog.get_product(COFFEE_ID).stock_quantity == 28


def test_stock_low(app, seeded):
    runner = app.test_cli_runner()
    assert "No products at or below minimum stock." in runner.invoke(args=["stock", "low"]).output

    seeded.ledger.adjust_stock(COFFEE_ID, -25, reason="manual-adjustment", actor_id=None)
    result = runner.invoke(args=["stock", "low"])

    assert result.exit_code == 0
    assert COFFEE_ID in result.output
    assert MILK_ID not in result.output


def test_sales_report(app, seeded):
    seeded.cart.add_line(MILK_ID, 2)
    seeded.cart.add_line(RICE_ID, 1)
    seeded.committer.commit(client_id="1", payment_method="cash", discount_percent=10)

    result = app.test_cli_runner().invoke(args=["reports", "sales", "--top", "1"])

    assert result.exit_code == 0, result.output
    assert "Sales: 1" in result.output
    assert "Total: 31.39" in result.output
    assert "Discounts: 3.49" in result.output
    assert "Whole Milk" in result.output
    assert "Rice" not in result.output


def test_sales_report_bad_range(app, seeded):
    result = app.test_cli_runner().invoke(args=["reports", "sales", "--start", "not-a-date"])
    assert result.exit_code == 1
    assert "FAIL" in result.output


def test_reset_db_can_be_aborted(app, seeded):
    result = app.test_cli_runner().invoke(args=["system", "reset-db"], input="n\n")

    assert result.exit_code == 1
    assert len(seeded.catalog.list_products()) == 3
