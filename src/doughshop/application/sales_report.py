"""Application service: Sales Report use case (query)."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable

from doughshop.domain.model.order import Order, OrderStatus
from doughshop.domain.model.value_objects import Money
from doughshop.domain.repository.order_repository import OrderRepository

DAILY_BREAKDOWN_DAYS = 7


class ReportPeriod(Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class DailySales:
    day: date
    order_count: int
    revenue: str


@dataclass(frozen=True)
class SalesReportDTO:
    period: str
    order_count: int
    revenue: str
    average_order_value: str
    top_products: list[tuple[str, int]]
    orders_by_status: dict[str, int]
    orders_by_payment_method: dict[str, int]
    revenue_by_day: list[DailySales]


class SalesReportHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def handle(self, top: int = 5, period: ReportPeriod = ReportPeriod.ALL) -> SalesReportDTO:
        """Summarize the orders placed within *period*.

        Revenue, averages, product and payment figures exclude cancelled
        orders; the status breakdown covers every order in the period.
        ``revenue_by_day`` always covers the last seven days, oldest first.
        Days are calendar days in the clock's time zone.
        """
        now = self._clock()
        today = now.date()
        orders = self._order_repo.list_all()
        in_period = [o for o in orders if self._in_period(self._day(o, now), today, period)]

        by_status = Counter(o.status.value for o in in_period)
        sold = [o for o in in_period if o.status is not OrderStatus.CANCELLED]

        revenue = Money.sum(o.total for o in sold)
        units: Counter[str] = Counter()
        for order in sold:
            for line in order.lines:
                units[line.product_name] += line.quantity.value

        return SalesReportDTO(
            period=period.value,
            order_count=len(sold),
            revenue=str(revenue),
            average_order_value=str(revenue.average(len(sold))),
            top_products=units.most_common(top),
            orders_by_status=dict(by_status),
            orders_by_payment_method=dict(Counter(o.payment_method.value for o in sold)),
            revenue_by_day=self._by_day(orders, now),
        )

    @staticmethod
    def _day(order: Order, now: datetime) -> date:
        return order.created_at.astimezone(now.tzinfo).date()

    @staticmethod
    def _in_period(day: date, today: date, period: ReportPeriod) -> bool:
        if period is ReportPeriod.ALL:
            return True
        if period is ReportPeriod.TODAY:
            start = today
        elif period is ReportPeriod.WEEK:
            start = today - timedelta(days=7)
        elif period is ReportPeriod.MONTH:
            start = today.replace(day=1)
        else:
            start = today.replace(month=1, day=1)
        return start <= day <= today

    def _by_day(self, orders: list[Order], now: datetime) -> list[DailySales]:
        today = now.date()
        days = [today - timedelta(days=n) for n in range(DAILY_BREAKDOWN_DAYS - 1, -1, -1)]
        totals: dict[date, list[Order]] = {day: [] for day in days}
        for order in orders:
            if order.status is OrderStatus.CANCELLED:
                continue
            day = self._day(order, now)
            if day in totals:
                totals[day].append(order)
        return [
            DailySales(
                day=day,
                order_count=len(totals[day]),
                revenue=str(Money.sum(o.total for o in totals[day])),
            )
            for day in days
        ]
