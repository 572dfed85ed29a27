"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from doughshop.application.add_to_cart import AddToCartHandler
from doughshop.application.dto import CartDTO
from doughshop.application.remove_from_cart import RemoveFromCartHandler
from doughshop.application.show_cart import ShowCartHandler
from doughshop.application.update_cart_quantity import UpdateCartQuantityHandler
from doughshop.domain.exceptions import DomainException
from doughshop.domain.model.product import Customization
from doughshop.infrastructure.cli.context import CliContext, pass_cli


def _parse_toppings(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ('classic=Sprinkles', 'premium=Almonds') into {tier: option}."""
    toppings: dict[str, str] = {}
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(
                f"Invalid topping '{pair}'. Expected 'tier=Option'."
            )
        tier, option = pair.split("=", 1)
        toppings[tier.strip()] = option.strip()
    return toppings


def _display_cart(dto: CartDTO) -> None:
    if not dto.lines:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Line':<13} {'Product':<24} {'Qty':>4} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*64}")
    for line in dto.lines:
        click.echo(
            f"  {line.line_id:<13} {line.product_name:<24} {line.quantity:>4} "
            f"{line.unit_price:>10} {line.line_total:>10}"
        )
        if line.customization:
            click.echo(f"  {'':<13} {line.customization}")
    click.echo(f"  {'-'*64}")
    click.echo(f"  {'Cart Total':<43} {dto.total:>20}")


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--qty", "quantity", default=1, type=int, show_default=True, help="Quantity.")
@click.option("--flavor", "flavors", multiple=True, help="Flavor (repeatable).")
@click.option("--topping", "toppings", multiple=True, help="Topping as 'tier=Option' (repeatable).")
@pass_cli
def cart_add(
    ctx: CliContext,
    product_id: str,
    quantity: int,
    flavors: tuple[str, ...],
    toppings: tuple[str, ...],
) -> None:
    """Add a customized product to the cart."""
    customization = Customization(flavors=flavors, toppings=_parse_toppings(toppings))
    handler = AddToCartHandler(
        cart_repo=ctx.services.carts,
        product_repo=ctx.services.products,
    )

    try:
        dto = handler.handle(
            customer_key=ctx.actor.cart_key,
            product_id=product_id,
            customization=customization,
            quantity=quantity,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added to cart ({dto.total_items} items, {dto.total})")


@click.command("show")
@pass_cli
def cart_show(ctx: CliContext) -> None:
    """Show the cart."""
    handler = ShowCartHandler(cart_repo=ctx.services.carts)
    _display_cart(handler.handle(ctx.actor.cart_key))


@click.command("qty")
@click.option("--line", "line_id", required=True, help="Cart line ID.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity (0 removes).")
@pass_cli
def cart_qty(ctx: CliContext, line_id: str, quantity: int) -> None:
    """Change the quantity of a cart line."""
    handler = UpdateCartQuantityHandler(
        cart_repo=ctx.services.carts,
        ledger=ctx.services.ledger,
    )

    try:
        result = handler.handle(ctx.actor.cart_key, line_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.warning:
        click.echo(f"Warning: {result.warning}", err=True)
    _display_cart(result.cart)


@click.command("remove")
@click.option("--line", "line_id", required=True, help="Cart line ID.")
@pass_cli
def cart_remove(ctx: CliContext, line_id: str) -> None:
    """Remove a line from the cart."""
    handler = RemoveFromCartHandler(cart_repo=ctx.services.carts)

    try:
        dto = handler.handle(ctx.actor.cart_key, line_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)
