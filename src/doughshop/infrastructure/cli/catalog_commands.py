"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from doughshop.application.set_option_availability import SetOptionAvailabilityHandler
from doughshop.domain.exceptions import DomainException
from doughshop.domain.model.product import CustomizationSchema
from doughshop.infrastructure.cli.context import CliContext, pass_cli, require_admin


def _options(schema: CustomizationSchema, options: tuple[str, ...], tier: str | None = None) -> str:
    return ", ".join(
        o if schema.is_available(o, tier) else f"{o} (unavailable)" for o in options
    )


@click.command("list")
@pass_cli
def catalog_list(ctx: CliContext) -> None:
    """List all products and their customization options."""
    products = ctx.services.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10}")
    click.echo("-" * 42)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<24} {str(p.price):>10}")
        schema = p.customization
        if schema.flavors:
            click.echo(
                f"{'':<6} flavors (up to {schema.max_flavors}): "
                f"{_options(schema, schema.flavors)}"
            )
        for tier, options in schema.topping_tiers.items():
            click.echo(f"{'':<6} {tier} toppings: {_options(schema, options, tier)}")


@click.command("set-availability")
@click.option("--flavor", default=None, help="Flavor name.")
@click.option("--topping", default=None, help="Topping as tier=Option, e.g. classic=Mallows.")
@click.option(
    "--available/--unavailable",
    default=True,
    show_default=True,
    help="Switch the option on or off.",
)
@pass_cli
def catalog_set_availability(
    ctx: CliContext, flavor: str | None, topping: str | None, available: bool
) -> None:
    """Switch a flavor or topping on or off for every product (admin)."""
    require_admin(ctx)
    if (flavor is None) == (topping is None):
        raise click.ClickException("Give exactly one of --flavor or --topping")

    tier = None
    option = flavor
    if topping is not None:
        tier, sep, option = topping.partition("=")
        if not sep or not tier or not option:
            raise click.ClickException(f"Topping must look like tier=Option, got '{topping}'")

    handler = SetOptionAvailabilityHandler(product_repo=ctx.services.products)
    try:
        product_ids = handler.handle(option=option, available=available, tier=tier)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "available" if available else "unavailable"
    click.echo(f"'{option}' is now {state} for products: {', '.join(product_ids)}")
