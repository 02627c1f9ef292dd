"""Product inventory commands."""

import click

from posledger.cli.error_handling import handle_domain_error
from posledger.domain.errors import DomainError
from posledger.domain.inventory import ProductService
from posledger.utils.amount_parser import format_amount


@click.group()
def inventory_group():
    """Manage stocked products valued in the summary report."""
    pass


@inventory_group.command("add")
@click.argument("name")
@click.option("--sku", required=True, help="Unique stock keeping unit")
@click.option("--stock", type=click.IntRange(min=0), default=0, show_default=True, help="Units in stock")
@click.option("--cost", "average_cost", help="Average cost per unit")
@click.option("--price", "selling_price", help="Selling price per unit")
@click.pass_context
def add_product(ctx, name, sku, stock, average_cost, selling_price):
    """Add a stocked product.

    Examples:
        posledger inventory add "SSD 512GB" --sku SSD-512 --stock 10 --cost 550000 --price 750000
    """
    service = ProductService(ctx.obj["db"])
    try:
        product_id = service.create_product(
            name=name,
            sku=sku,
            stock=stock,
            average_cost=average_cost,
            selling_price=selling_price,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created product {sku} '{name}' (ID: {product_id})")


@inventory_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive products")
@click.pass_context
def list_products(ctx, include_inactive: bool):
    """List products with their stock value at average cost."""
    products = ProductService(ctx.obj["db"]).list_products(active_only=not include_inactive)
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    click.echo("-" * 80)
    for product in products:
        if product.average_cost is None:
            value = "-"
        else:
            value = format_amount(product.average_cost * product.stock)
        click.echo(f"{product.sku:12s} | {product.name:30s} | {product.stock:>6d} | {value:>16s}")


def register_commands(cli):
    """Register inventory commands with main CLI."""
    cli.add_command(inventory_group, name="inventory")
