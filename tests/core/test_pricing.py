"""Tests for the quote pricing engine."""

from decimal import Decimal

import pytest

from core.exceptions import QuoteValidationError
from core.models import ItemKind
from core.pricing import (
    describe_installments,
    discount_amount,
    installment_amount,
    installment_schedule,
    option_label,
    option_total,
    price_option,
    price_quote,
    subtotal,
    total_one_time,
)


class TestSubtotals:
    """Items are partitioned by kind; each item counts exactly once."""

    def test_partition_by_kind(self, scenario_items):
        assert subtotal(scenario_items, ItemKind.ONE_TIME) == 100000
        assert subtotal(scenario_items, ItemKind.RECURRING) == 5000

    def test_partition_sums_to_all_items(self, make_item):
        items = [
            make_item(1234, ItemKind.ONE_TIME),
            make_item(999, ItemKind.RECURRING),
            make_item(1, ItemKind.ONE_TIME),
            make_item(0, ItemKind.RECURRING),
        ]

        total = subtotal(items, ItemKind.ONE_TIME) + subtotal(items, ItemKind.RECURRING)
        assert total == sum(item.amount_cents for item in items)

    def test_empty_items(self):
        assert subtotal([], ItemKind.ONE_TIME) == 0
        assert subtotal([], ItemKind.RECURRING) == 0


class TestDiscount:

    def test_five_percent(self):
        assert discount_amount(100000, Decimal("5")) == Decimal("5000")

    def test_total_after_discount(self):
        assert total_one_time(100000, Decimal("5000")) == Decimal("95000")

    def test_zero_discount_keeps_total(self):
        assert discount_amount(100000, Decimal("0")) == 0

    def test_full_discount(self):
        assert discount_amount(100000, Decimal("100")) == Decimal("100000")

    def test_fractional_percent_stays_unrounded(self):
        """7.5% of 333 cents is 24.975 cents; no rounding inside the engine."""
        assert discount_amount(333, Decimal("7.5")) == Decimal("24.975")

    @pytest.mark.parametrize("percent", ["-1", "100.01", "150"])
    def test_out_of_range_rejected(self, percent):
        with pytest.raises(QuoteValidationError, match="discount_percent"):
            discount_amount(100000, Decimal(percent))

    def test_option_total_uses_option_discount(self, make_option):
        option = make_option("opt", discount="10")
        assert option_total(100000, option) == Decimal("90000")


class TestInstallments:

    def test_amount_is_unrounded(self):
        assert installment_amount(Decimal("100000"), 3) == Decimal("100000") / 3

    def test_schedule_puts_remainder_on_last(self):
        assert installment_schedule(Decimal("100000"), 3) == [33333, 33333, 33334]

    def test_schedule_sums_to_rounded_total(self):
        total = Decimal("95000") / 7
        schedule = installment_schedule(total, 4)
        assert sum(schedule) == 13571  # 13571.43 rounded half up

    def test_single_installment(self):
        assert installment_schedule(Decimal("95000"), 1) == [95000]

    def test_zero_installments_rejected(self):
        with pytest.raises(QuoteValidationError, match="installments"):
            installment_amount(100000, 0)

    def test_schedule_rejects_huge_count(self):
        with pytest.raises(QuoteValidationError, match="between 1 and 360"):
            installment_schedule(Decimal("100000"), 10**30)


class TestDescribeInstallments:

    def test_single_payment(self):
        assert describe_installments(1, False) == "Single payment"

    def test_single_payment_ignores_down_payment(self):
        assert describe_installments(1, True) == "Single payment"

    def test_down_payment(self):
        assert describe_installments(3, True) == "1 payment now + 2 monthly"

    def test_no_down_payment(self):
        assert describe_installments(3, False) == "3 monthly installments"


class TestOptionLabel:

    def test_first_options(self):
        assert option_label(0) == "Option A"
        assert option_label(1) == "Option B"
        assert option_label(25) == "Option Z"

    def test_past_z(self):
        assert option_label(26) == "Option AA"


class TestScenarios:
    """End-to-end pricing of the reference scenarios."""

    def test_one_time_with_discount_and_recurring(self, scenario_items, make_option):
        """5% discount, single payment: 950 once plus 50 per month."""
        pricing = price_option(scenario_items, make_option("opt-a", discount="5"))

        assert pricing.subtotal_one_time_cents == 100000
        assert pricing.discount_cents == Decimal("5000")
        assert pricing.total_one_time_cents == Decimal("95000")
        assert pricing.subtotal_recurring_cents == 5000
        assert pricing.installment_schedule_cents == [95000]
        assert pricing.installment_description == "Single payment"

    def test_three_installments_without_discount(self, scenario_items, make_option):
        """No discount, 3 installments: 333.33 each, remainder on the last."""
        pricing = price_option(scenario_items, make_option("opt-b", discount="0", installments=3))

        assert pricing.total_one_time_cents == Decimal("100000")
        assert pricing.installment_schedule_cents == [33333, 33333, 33334]
        assert pricing.installment_description == "3 monthly installments"

    def test_recurring_unaffected_by_option(self, scenario_items, make_option):
        pricing = price_quote(scenario_items, [
            make_option("a", discount="5"),
            make_option("b", discount="50", installments=10),
        ])

        assert [o.subtotal_recurring_cents for o in pricing.options] == [5000, 5000]


class TestPriceQuote:

    def test_one_breakdown_per_option_in_order(self, scenario_items, make_option):
        pricing = price_quote(scenario_items, [
            make_option("a", discount="5"),
            make_option("b", installments=3),
        ])

        assert [o.option_id for o in pricing.options] == ["a", "b"]
        assert [o.label for o in pricing.options] == ["Option A", "Option B"]
        assert not pricing.is_single_option

    def test_headline_uses_first_option(self, scenario_items, make_option):
        pricing = price_quote(scenario_items, [
            make_option("a", discount="5"),
            make_option("b"),
        ])

        assert pricing.editor_headline_cents == Decimal("100000")  # 95000 + 5000

    def test_headline_without_options_is_undiscounted(self, scenario_items):
        pricing = price_quote(scenario_items, [])

        assert pricing.options == []
        assert pricing.editor_headline_cents == Decimal("105000")

    def test_for_option(self, scenario_items, make_option):
        pricing = price_quote(scenario_items, [make_option("a"), make_option("b")])

        assert pricing.for_option("b").option_id == "b"
        assert pricing.for_option("missing") is None

    def test_is_pure(self, scenario_items, make_option):
        """Same inputs, same numbers."""
        options = [make_option("a", discount="12.5", installments=7)]

        assert price_quote(scenario_items, options) == price_quote(scenario_items, options)
