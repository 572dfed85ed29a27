"""CLI commands for daily stock management (admin)."""

from __future__ import annotations

import click

from doughshop.application.adjust_stock import AdjustStockHandler
from doughshop.application.dto import StockLineDTO
from doughshop.application.reset_daily_stock import ResetDailyStockHandler
from doughshop.application.set_daily_limit import SetDailyLimitHandler
from doughshop.application.show_inventory import ShowInventoryHandler
from doughshop.domain.exceptions import DomainException
from doughshop.infrastructure.cli.context import CliContext, pass_cli, require_admin


def _display_stock(lines: list[StockLineDTO]) -> None:
    click.echo(
        f"{'ID':<6} {'Product':<24} {'Limit':>6} {'Stock':>6} {'Sold':>6} {'Status':>9}"
    )
    click.echo("-" * 62)
    for line in lines:
        flag = "  LOW" if line.low else ""
        click.echo(
            f"{line.product_id:<6} {line.product_name:<24} {line.daily_limit:>6} "
            f"{line.current_stock:>6} {line.sold_today:>6} {line.status:>9}{flag}"
        )


@click.command("show")
@pass_cli
def inventory_show(ctx: CliContext) -> None:
    """Show today's stock for every product."""
    handler = ShowInventoryHandler(
        ledger=ctx.services.ledger,
        product_repo=ctx.services.products,
    )
    lines = handler.handle()

    if not lines:
        click.echo("No products found.")
        return
    _display_stock(lines)


@click.command("low")
@pass_cli
def inventory_low(ctx: CliContext) -> None:
    """Show only products at or below the low-stock threshold."""
    handler = ShowInventoryHandler(
        ledger=ctx.services.ledger,
        product_repo=ctx.services.products,
    )
    lines = handler.handle(low_only=True)

    if not lines:
        click.echo("All products are well stocked.")
        return
    _display_stock(lines)


@click.command("set-limit")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--limit", "daily_limit", required=True, type=int, help="New daily limit.")
@pass_cli
def inventory_set_limit(ctx: CliContext, product_id: str, daily_limit: int) -> None:
    """Set a product's daily limit."""
    require_admin(ctx)
    handler = SetDailyLimitHandler(
        ledger=ctx.services.ledger,
        product_repo=ctx.services.products,
    )

    try:
        line = handler.handle(product_id=product_id, daily_limit=daily_limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Daily limit for '{line.product_name}' set to {line.daily_limit} "
        f"({line.current_stock} available)"
    )


@click.command("adjust")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--delta", default=0, type=int, help="Units to add (negative to remove).")
@click.option(
    "--reconcile",
    is_flag=True,
    default=False,
    help="Restore stock to daily limit minus units sold today.",
)
@pass_cli
def inventory_adjust(ctx: CliContext, product_id: str, delta: int, reconcile: bool) -> None:
    """Correct a product's current stock."""
    require_admin(ctx)
    if not reconcile and delta == 0:
        raise click.ClickException("Give --delta or --reconcile")

    handler = AdjustStockHandler(
        ledger=ctx.services.ledger,
        product_repo=ctx.services.products,
    )

    try:
        line = handler.handle(product_id=product_id, delta=delta, reconcile=reconcile)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Stock for '{line.product_name}' is now {line.current_stock}/{line.daily_limit}"
    )


@click.command("reset")
@pass_cli
def inventory_reset(ctx: CliContext) -> None:
    """Start a new business day: restore every product to its daily limit."""
    require_admin(ctx)
    handler = ResetDailyStockHandler(ledger=ctx.services.ledger)
    sold = handler.handle()

    click.echo(f"Daily stock reset. Units sold since last reset: {sum(sold.values())}")
    for product_id, units in sorted(sold.items()):
        if units:
            click.echo(f"  {product_id:<6} {units:>5}")
