import click

from doughshop.domain.model.identity import Actor, Role
from doughshop.infrastructure.bootstrap import Services, build_services
from doughshop.infrastructure.cli.cart_commands import cart_add, cart_qty, cart_remove, cart_show
from doughshop.infrastructure.cli.catalog_commands import catalog_list, catalog_set_availability
from doughshop.infrastructure.cli.context import CliContext
from doughshop.infrastructure.cli.inventory_commands import (
    inventory_adjust,
    inventory_low,
    inventory_reset,
    inventory_set_limit,
    inventory_show,
)
from doughshop.infrastructure.cli.order_commands import (
    order_cancel,
    order_list,
    order_place,
    order_reconcile,
    order_show,
    order_transition,
)
from doughshop.infrastructure.cli.report_commands import report, watch
from doughshop.infrastructure.config import load_settings
from doughshop.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--customer", default="", help="Customer id (empty for a guest).")
@click.option("--email", default="", help="Customer email.")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role]),
    default=Role.CUSTOMER.value,
    show_default=True,
    help="Role of the person running the command.",
)
@click.pass_context
def cli(ctx: click.Context, customer: str, email: str, role: str) -> None:
    """doughshop: daily stock, carts and orders for a small bakeshop."""
    services = ctx.obj if isinstance(ctx.obj, Services) else None
    if services is None:
        settings = load_settings()
        configure_logging(level=settings.log_level, json=settings.log_json)
        services = build_services(settings)
    ctx.obj = CliContext(
        services=services,
        actor=Actor(customer_id=customer, email=email, role=Role(role)),
    )


@cli.group()
def catalog() -> None:
    """Browse the product catalog and switch options on or off."""


@cli.group()
def inventory() -> None:
    """Manage daily stock."""


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def order() -> None:
    """Place and manage orders."""


# Register subcommands
catalog.add_command(catalog_list)
catalog.add_command(catalog_set_availability)
inventory.add_command(inventory_show)
inventory.add_command(inventory_set_limit)
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_low)
inventory.add_command(inventory_reset)
cart.add_command(cart_add)
cart.add_command(cart_show)
cart.add_command(cart_qty)
cart.add_command(cart_remove)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_list)
order.add_command(order_transition)
order.add_command(order_cancel)
order.add_command(order_reconcile)
cli.add_command(report)
cli.add_command(watch)
