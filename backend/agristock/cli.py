# Overview: Flask CLI command groups for inspection and maintenance.

# backend/agristock/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to agristock (PowerShell: $env:FLASK_APP="agristock").
# - Use: python -m flask <group> <command> [options]
#
# Stock:
# - python -m flask stock list
#   List every stock item with quantity, price and value.
# - python -m flask stock low
#   List items below their own min_stock threshold.
#
# Sales:
# - python -m flask sales recent [--limit 5]
#   Show the most recently recorded sales.
#
# Data:
# - python -m flask data reset --yes
#   Delete all stock and sales records (cannot be undone).

import click
from flask.cli import with_appcontext

from .services.session_service import get_store_session


@click.group('stock')
def stock_group():
    """Stock inspection commands."""


@stock_group.command('list')
@with_appcontext
def list_stock():
    """List stock items."""
    inventory = get_store_session().inventory
    if not len(inventory):
        click.echo("No stock items.")
        return

    for item in inventory.items:
        click.echo(
            f"{item.id}  {item.name:<30} {item.display_category:<22} "
            f"{item.quantity:>10g} {item.unit:<8} @ {item.price:g}  = {item.value:g}"
        )
    click.echo(f"Total value: {inventory.total_value():g}  Total units: {inventory.total_units():g}")


@stock_group.command('low')
@with_appcontext
def low_stock():
    """List items below their low-stock threshold."""
    items = get_store_session().inventory.list_low_stock()
    if not items:
        click.echo("PASS No low stock items.")
        return

    for item in items:
        click.echo(f"WARN {item.name}: {item.quantity:g} {item.unit} (min {item.min_stock:g})")


@click.group('sales')
def sales_group():
    """Sales inspection commands."""


@sales_group.command('recent')
@click.option('--limit', default=5, show_default=True, help='Number of sales to show')
@with_appcontext
def recent_sales(limit):
    """Show the most recently recorded sales."""
    sales = get_store_session().sales.recent_sales(limit)
    if not sales:
        click.echo("No sales yet.")
        return

    for sale in sales:
        click.echo(
            f"{sale.sale_date}  {sale.fertilizer_name:<30} {sale.quantity:g} {sale.unit:<8} "
            f"{sale.total_price:>10.2f}  {sale.customer_name} ({sale.customer_phone})  {sale.payment_method}"
        )


@click.group('data')
def data_group():
    """Stored data maintenance."""


@data_group.command('reset')
@click.option('--yes', is_flag=True, help='Confirm deletion of all records')
@with_appcontext
def reset_data(yes):
    """Delete every stock item and sale."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)

    get_store_session().reset()
    click.echo("PASS All stock and sales records deleted.")


def register_commands(app):
    app.cli.add_command(stock_group)
    app.cli.add_command(sales_group)
    app.cli.add_command(data_group)
