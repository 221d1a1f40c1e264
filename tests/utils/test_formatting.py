"""Tests for display-boundary currency helpers."""

from decimal import Decimal

import pytest

from utils.formatting import format_currency, round_cents


class TestRoundCents:

    @pytest.mark.parametrize("value,expected", [
        (Decimal("33333.333"), 33333),
        (Decimal("24.5"), 25),
        (Decimal("24.49"), 24),
        (Decimal("-0.5"), -1),
        (100, 100),
    ])
    def test_half_up(self, value, expected):
        assert round_cents(value) == expected


class TestFormatCurrency:

    @pytest.mark.parametrize("cents,expected", [
        (123456, "R$ 1.234,56"),
        (95000, "R$ 950,00"),
        (5, "R$ 0,05"),
        (0, "R$ 0,00"),
        (123456789, "R$ 1.234.567,89"),
        (-5000, "-R$ 50,00"),
    ])
    def test_brazilian_format(self, cents, expected):
        assert format_currency(cents) == expected

    def test_unrounded_installment(self):
        assert format_currency(Decimal("100000") / 3) == "R$ 333,33"

    def test_custom_symbol(self):
        assert format_currency(1000, symbol="US$") == "US$ 10,00"
