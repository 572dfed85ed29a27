"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from doughshop.domain.exceptions import ValidationError
from doughshop.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation_defaults_to_pesos(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "PHP"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        assert Money.of(10).amount == Decimal("10")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition(self):
        assert Money.of("120") + Money.of("50") == Money.of("170")

    def test_multiplication_by_int(self):
        assert Money.of("120.00") * 3 == Money.of("360.00")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * 1.5

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "PHP") + Money(Decimal("5"), "USD")

    def test_str_formatting(self):
        assert str(Money.of("120")) == "₱120.00"
        assert str(Money.of("9.5")) == "₱9.50"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") <= Money.of("10")

    def test_zero(self):
        assert Money.zero() == Money.of("0.00")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-3)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)

    def test_str(self):
        assert str(Quantity(7)) == "7"


class TestMoneyHelpers:

    def test_of_rounds_to_centavo(self):
        assert Money.of("12.345") == Money.of("12.35")

    def test_thousands_separator(self):
        assert str(Money.of("1250")) == "₱1,250.00"

    def test_sum(self):
        assert Money.sum([Money.of("120"), Money.of("60"), Money.of("50")]) == Money.of("230")
        assert Money.sum([]) == Money.zero()

    def test_average(self):
        assert Money.of("100").average(3) == Money.of("33.33")
        assert Money.of("100").average(0) == Money.zero()
