# Overview: Flask CLI command groups for bootstrap, stock maintenance, and reports.

# backend/orionpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: flask --app orionpos <group> <command> [options]
#
# System bootstrap/repair:
# - flask --app orionpos system init [--demo]
#   Create tables if missing and the walk-in client; --demo also loads the sample catalog.
# - flask --app orionpos system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Stock:
# - flask --app orionpos stock adjust 7891000315507 --delta -5 --reason manual-adjustment --note "Broken pack"
#   Apply a signed stock delta through the ledger.
# - flask --app orionpos stock low
#   List products at or below their stock minimum.
#
# Reports:
# - flask --app orionpos reports sales --start 2026-10-01 --end 2026-10-19
#   Sales totals, payment methods and best sellers for the period.

import click
from flask import current_app
from flask.cli import with_appcontext

from .domain import REASON_MANUAL_ADJUSTMENT, REASON_RESTOCK
from .errors import PosError
from .extensions import db
from .services import current_services
from .services.report_service import parse_report_range
from .services.seed_service import seed_defaults


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@click.option('--demo', is_flag=True, help='Also load the sample products and clients')
@with_appcontext
def init_system(demo):
    """
    Initialize the terminal: schema, walk-in client and (optionally) demo data.

    Idempotent; existing rows are left alone.
    """
    click.echo("START Initializing ORION POS...")
    db.create_all()

    services = current_services()
    try:
        created = seed_defaults(
            services.catalog,
            default_client_id=current_app.config["POS_DEFAULT_CLIENT_ID"],
            demo=demo,
        )
    except PosError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    click.echo(f"PASS Clients created: {', '.join(created['clients']) or '-'}")
    click.echo(f"PASS Products created: {', '.join(created['products']) or '-'}")
    click.echo("DONE ORION POS initialized")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("DONE Database reset")


@click.group('stock')
def stock_group():
    """Stock ledger commands."""


@stock_group.command('adjust')
@click.argument('product_id')
@click.option('--delta', type=int, required=True, help='Signed quantity, e.g. -5 or 12')
@click.option('--reason', type=click.Choice([REASON_MANUAL_ADJUSTMENT, REASON_RESTOCK]), default=REASON_MANUAL_ADJUSTMENT)
@click.option('--note', default=None, help='Free-text note stored on the movement')
@click.option('--actor', 'actor_id', default=None, help='Operator id')
@with_appcontext
def adjust_stock_cli(product_id, delta, reason, note, actor_id):
    """Apply a signed --delta to PRODUCT_ID's stock."""
    try:
        product, movement = current_services().ledger.adjust_stock(
            product_id, delta, reason=reason, actor_id=actor_id, note=note
        )
    except PosError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    click.echo(
        f"PASS {movement.kind} {movement.quantity} x {product.name} ({product.id}); "
        f"stock now {product.stock_quantity}"
    )


@stock_group.command('low')
@with_appcontext
def low_stock_cli():
    """List products at or below their stock minimum."""
    report = current_services().reports.stock_report()
    rows = report["low_stock"]
    if not rows:
        click.echo("No products at or below minimum stock.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<16} {'Name':<30} {'Stock':>8} {'Minimum':>8}")
    click.echo("="*70)
    for row in rows:
        click.echo(f"{row['product_id']:<16} {row['name'][:30]:<30} {row['stock_quantity']:>8} {row['stock_minimum']:>8}")
    click.echo("="*70 + "\n")


@click.group('reports')
def reports_group():
    """Read-only reports."""


@reports_group.command('sales')
@click.option('--start', default=None, help='ISO date/datetime (inclusive)')
@click.option('--end', default=None, help='ISO date/datetime (a bare date includes that day)')
@click.option('--top', default=5, show_default=True, type=int, help='Number of best sellers')
@with_appcontext
def sales_report_cli(start, end, top):
    """Summarize committed sales."""
    try:
        start_dt, end_dt = parse_report_range(start, end)
    except PosError as e:
        click.echo(f"FAIL {e.message}")
        raise SystemExit(1)

    report = current_services().reports.sales_report(start_dt, end_dt, top=top)
    totals = report["totals"]
    click.echo(f"Sales: {totals['sales']}")
    click.echo(f"Total: {totals['total']}")
    click.echo(f"Discounts: {totals['discount']}")
    click.echo(f"Average ticket: {totals['average_ticket']}")

    if report["by_payment_method"]:
        click.echo("\nBy payment method:")
        for method, bucket in report["by_payment_method"].items():
            click.echo(f"  {method:<16} {bucket['count']:>5} {bucket['total']:>12}")

    if report["best_sellers"]:
        click.echo("\nBest sellers:")
        for entry in report["best_sellers"]:
            click.echo(f"  {entry['name'][:30]:<30} {entry['quantity']:>6} {entry['total']:>12}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(stock_group)
    app.cli.add_command(reports_group)
