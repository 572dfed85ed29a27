"""CLI commands for reporting and live stock watching."""

from __future__ import annotations

import time

import click

from doughshop.application.sales_report import ReportPeriod, SalesReportHandler
from doughshop.domain.events import StockChanged
from doughshop.infrastructure.cli.context import CliContext, pass_cli, require_admin
from doughshop.infrastructure.sync.replica import Snapshot, SnapshotReplica
from doughshop.infrastructure.sync.snapshots import stored_inventory_snapshot


@click.command("report")
@click.option("--top", default=5, type=int, show_default=True, help="Top products to show.")
@click.option(
    "--period",
    type=click.Choice([p.value for p in ReportPeriod]),
    default=ReportPeriod.ALL.value,
    show_default=True,
    help="Which orders to summarize, by the day they were placed.",
)
@pass_cli
def report(ctx: CliContext, top: int, period: str) -> None:
    """Sales summary for a period, plus the last seven days (admin)."""
    require_admin(ctx)
    dto = SalesReportHandler(order_repo=ctx.services.orders).handle(
        top=top, period=ReportPeriod(period)
    )

    click.echo(f"Period:              {dto.period}")
    click.echo(f"Orders:              {dto.order_count}")
    click.echo(f"Revenue:             {dto.revenue}")
    click.echo(f"Average order value: {dto.average_order_value}")
    click.echo()
    click.echo("Top products")
    for name, units in dto.top_products:
        click.echo(f"  {name:<24} {units:>5}")
    click.echo("Orders by status")
    for status, count in sorted(dto.orders_by_status.items()):
        click.echo(f"  {status:<24} {count:>5}")
    click.echo("Orders by payment method")
    for method, count in sorted(dto.orders_by_payment_method.items()):
        click.echo(f"  {method:<24} {count:>5}")
    click.echo("Last 7 days")
    for day in dto.revenue_by_day:
        click.echo(f"  {day.day.isoformat():<12} {day.order_count:>5} {day.revenue:>14}")


def _print_changes(old: Snapshot, new: Snapshot) -> None:
    for product_id, stock in sorted(new.items()):
        if old.get(product_id) != stock:
            click.echo(
                f"[{time.strftime('%H:%M:%S')}] {product_id:<6} "
                f"{stock['current_stock']:>4}/{stock['daily_limit']:<4} {stock['status']}"
            )


@click.command("watch")
@click.option("--interval", type=float, default=None, help="Poll interval in seconds.")
@click.option("--duration", type=float, default=None, help="Stop after this many seconds.")
@pass_cli
def watch(ctx: CliContext, interval: float | None, duration: float | None) -> None:
    """Print stock changes as they happen, including other processes' writes."""
    services = ctx.services
    replica = SnapshotReplica(
        stored_inventory_snapshot(services.inventory),
        poll_interval=interval or services.settings.poll_interval,
        name="watch",
    )
    replica.on_change(_print_changes)
    replica.follow(services.bus, [StockChanged])

    click.echo("Watching stock levels (Ctrl+C to stop)...")
    deadline = None if duration is None else time.monotonic() + duration
    with replica:
        try:
            while deadline is None or time.monotonic() < deadline:
                time.sleep(0.1)
        except KeyboardInterrupt:
            click.echo("Stopped.")
