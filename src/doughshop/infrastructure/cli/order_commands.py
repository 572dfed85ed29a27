"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import timedelta

import click

from doughshop.application.cancel_order import CancelOrderHandler
from doughshop.application.dto import OrderDTO
from doughshop.application.list_orders import ListOrdersHandler
from doughshop.application.place_order import PlaceOrderHandler
from doughshop.application.reconcile_sales import ReconcileSalesHandler
from doughshop.application.show_order import ShowOrderHandler
from doughshop.application.transition_order import TransitionOrderHandler
from doughshop.domain.exceptions import DomainException
from doughshop.domain.model.order import DeliveryMethod, OrderStatus, PaymentMethod
from doughshop.infrastructure.cli.context import CliContext, pass_cli, require_admin


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id or 'guest'} {dto.customer_email}".rstrip())
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Method:   {dto.delivery_method}, paid by {dto.payment_method}")
    if dto.cancelled_by:
        click.echo(f"Cancelled by: {dto.cancelled_by}")
    click.echo()

    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
        if item.customization:
            click.echo(f"    {item.customization}")
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Subtotal':<31} {dto.subtotal:>20}")
    click.echo(f"  {'Delivery Fee':<31} {dto.delivery_fee:>20}")
    click.echo(f"  {'Order Total':<31} {dto.total:>20}")


def _summary_line(dto: OrderDTO) -> str:
    return f"  #{dto.id:<6} {dto.created_at:<22} {dto.status:<18} {dto.total:>12}"


@click.command("place")
@click.option(
    "--payment",
    type=click.Choice([m.value for m in PaymentMethod]),
    required=True,
    help="Payment method.",
)
@click.option(
    "--delivery",
    type=click.Choice([m.value for m in DeliveryMethod]),
    default=DeliveryMethod.PICKUP.value,
    show_default=True,
    help="Delivery or pickup.",
)
@click.option("--notes", default="", help="Notes for the shop.")
@pass_cli
def order_place(ctx: CliContext, payment: str, delivery: str, notes: str) -> None:
    """Check out the cart and place a pending order."""
    services = ctx.services
    handler = PlaceOrderHandler(
        cart_repo=services.carts,
        order_repo=services.orders,
        journal_repo=services.journal,
        ledger=services.ledger,
        payment_gateway=services.payment_gateway,
        publisher=services.bus,
        delivery_fee=services.settings.delivery_fee,
        payment_timeout=services.settings.payment_timeout,
    )

    try:
        dto = handler.handle(
            customer=ctx.actor,
            payment_method=PaymentMethod(payment),
            delivery_method=DeliveryMethod(delivery),
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} placed  (status={dto.status})")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@pass_cli
def order_show(ctx: CliContext, order_id: int) -> None:
    """Show details of an order."""
    handler = ShowOrderHandler(order_repo=ctx.services.orders)

    try:
        dto = handler.handle(order_id, ctx.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus]),
    default=None,
    help="Only orders in this status.",
)
@pass_cli
def order_list(ctx: CliContext, status: str | None) -> None:
    """List your orders (admins see every order)."""
    handler = ListOrdersHandler(order_repo=ctx.services.orders)
    history = handler.handle(ctx.actor, OrderStatus(status) if status else None)

    if not history.active and not history.completed:
        click.echo("No orders found.")
        return

    click.echo(f"Active orders ({len(history.active)})")
    for dto in history.active:
        click.echo(_summary_line(dto))
    click.echo(f"Completed orders ({len(history.completed)})")
    for dto in history.completed:
        click.echo(_summary_line(dto))


@click.command("transition")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--to",
    "new_status",
    type=click.Choice([s.value for s in OrderStatus]),
    required=True,
    help="Target status.",
)
@pass_cli
def order_transition(ctx: CliContext, order_id: int, new_status: str) -> None:
    """Move an order to its next status (admin)."""
    services = ctx.services
    handler = TransitionOrderHandler(
        order_repo=services.orders,
        ledger=services.ledger,
        publisher=services.bus,
        order_locks=services.order_locks,
    )

    try:
        dto = handler.handle(order_id, OrderStatus(new_status), ctx.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} is now {dto.status}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@pass_cli
def order_cancel(ctx: CliContext, order_id: int) -> None:
    """Cancel an order and return its stock."""
    services = ctx.services
    handler = CancelOrderHandler(
        order_repo=services.orders,
        ledger=services.ledger,
        publisher=services.bus,
        order_locks=services.order_locks,
    )

    try:
        handler.handle(order_id, ctx.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("reconcile")
@click.option(
    "--grace",
    type=float,
    default=None,
    help="Seconds an unsettled sale is left alone before its stock is returned.",
)
@pass_cli
def order_reconcile(ctx: CliContext, grace: float | None) -> None:
    """Settle sales left over from failed checkouts (admin)."""
    require_admin(ctx)
    if grace is None:
        grace = ctx.services.settings.reconcile_grace
    handler = ReconcileSalesHandler(
        journal_repo=ctx.services.journal,
        order_repo=ctx.services.orders,
        ledger=ctx.services.ledger,
        grace=timedelta(seconds=grace),
    )
    result = handler.handle()

    click.echo(
        f"Reconciled: {len(result.settled)} settled, "
        f"{len(result.compensated)} compensated, "
        f"{len(result.in_flight)} still in flight."
    )
    for order_id in result.compensated:
        click.echo(f"  stock returned for order #{order_id}")
