"""Value Objects shared across the domain.

Prices are pesos held as Decimal centavo amounts; quantities are whole
units (boxes or sets), never pieces.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from doughshop.domain.exceptions import ValidationError

CENTAVO = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """A non-negative peso amount.

    Decimal keeps line totals and order totals exact; ``of`` rounds input
    to the centavo so prices typed in the CLI or read from JSON compare
    equal to computed ones.
    """

    amount: Decimal
    currency: str = "PHP"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Can only multiply Money by int, got {type(units).__name__}")
        return Money(self.amount * units, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __str__(self) -> str:
        return f"₱{self.amount:,.2f}"

    def average(self, count: int) -> Money:
        """This amount split evenly over *count*, rounded to the centavo."""
        if count <= 0:
            return Money.zero()
        share = (self.amount / count).quantize(CENTAVO, rounding=ROUND_HALF_UP)
        return Money(share, self.currency)

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        try:
            value = Decimal(str(amount)).quantize(CENTAVO, rounding=ROUND_HALF_UP)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(value)

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))

    @staticmethod
    def sum(amounts: Iterable[Money]) -> Money:
        total = Money.zero()
        for amount in amounts:
            total = total + amount
        return total


@dataclass(frozen=True)
class Quantity:
    """Units of one product on a cart or order line; always at least one."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
