"""
Quote pricing engine.

Pure functions over line items and payment options. No I/O, no hidden
state: the same inputs always give the same numbers.

Money flows as integer cents for subtotals and as unrounded Decimal cents
once a discount or an installment split is applied. Rounding to whole cents
happens only at the display boundary (installment_schedule and
utils.formatting).

Rules:
- Discounts apply to the one-time subtotal only. Recurring charges are never
  discounted and do not depend on the payment option.
- Installments split the option total into N equal parts. The down payment
  flag changes wording, not math.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from pydantic import BaseModel

from core.exceptions import QuoteValidationError
from core.models import MAX_INSTALLMENTS, ItemKind, LineItem, PaymentOption
from utils.formatting import round_cents

_HUNDRED = Decimal(100)


class OptionPricing(BaseModel):
    """Everything the viewer shows for one payment option."""

    option_id: str
    label: str
    payment_method_id: str
    discount_percent: Decimal
    installments: int
    has_down_payment: bool
    payment_terms: str | None
    subtotal_one_time_cents: int
    discount_cents: Decimal
    total_one_time_cents: Decimal
    subtotal_recurring_cents: int
    installment_cents: Decimal
    installment_schedule_cents: list[int]
    installment_description: str


class QuotePricing(BaseModel):
    """Pricing for a whole quote, one breakdown per payment option."""

    subtotal_one_time_cents: int
    subtotal_recurring_cents: int
    options: list[OptionPricing]
    editor_headline_cents: Decimal  # first option's one-time total + recurring

    @property
    def is_single_option(self) -> bool:
        return len(self.options) == 1

    def for_option(self, option_id: str) -> OptionPricing | None:
        """Breakdown for a specific option, or None if it is not on the quote."""
        for option in self.options:
            if option.option_id == option_id:
                return option
        return None


def _check_percent(discount_percent: Decimal) -> Decimal:
    percent = Decimal(discount_percent)
    if percent < 0 or percent > 100:
        raise QuoteValidationError(
            f"discount_percent: must be between 0 and 100 (got {discount_percent})"
        )
    return percent


def _check_installments(installments: int) -> int:
    if installments < 1 or installments > MAX_INSTALLMENTS:
        raise QuoteValidationError(
            f"installments: must be between 1 and {MAX_INSTALLMENTS} (got {installments})"
        )
    return installments


def subtotal(items: Iterable[LineItem], kind: ItemKind) -> int:
    """Sum of amounts (cents) over items of the given kind."""
    return sum(item.amount_cents for item in items if item.kind == kind)


def discount_amount(subtotal_one_time: int | Decimal, discount_percent: Decimal) -> Decimal:
    """Discount in cents on the one-time subtotal: S * d / 100."""
    return Decimal(subtotal_one_time) * _check_percent(discount_percent) / _HUNDRED


def total_one_time(subtotal_one_time: int | Decimal, discount: Decimal) -> Decimal:
    """One-time subtotal less its discount."""
    return Decimal(subtotal_one_time) - Decimal(discount)


def option_total(subtotal_one_time: int | Decimal, option: PaymentOption) -> Decimal:
    """One-time total under a specific option: S * (1 - d / 100)."""
    percent = _check_percent(option.discount_percent)
    return Decimal(subtotal_one_time) * (1 - percent / _HUNDRED)


def installment_amount(total: Decimal | int, installments: int) -> Decimal:
    """Unrounded per-installment amount in cents."""
    return Decimal(total) / _check_installments(installments)


def installment_schedule(total: Decimal | int, installments: int) -> list[int]:
    """
    Split a total into whole-cent installments for display.

    The total is rounded to cents once, divided into equal parts, and the
    leftover cents land on the last installment so the parts always add up
    to the displayed total. 1000.00 / 3 -> [333.33, 333.33, 333.34].
    """
    n = _check_installments(installments)
    total_cents = round_cents(total)
    base = total_cents // n
    schedule = [base] * n
    schedule[-1] += total_cents - base * n
    return schedule


def describe_installments(installments: int, has_down_payment: bool) -> str:
    """Human wording for an installment plan."""
    n = _check_installments(installments)
    if n == 1:
        return "Single payment"
    if has_down_payment:
        return f"1 payment now + {n - 1} monthly"
    return f"{n} monthly installments"


def option_label(index: int) -> str:
    """Display label by position: 0 -> 'Option A', 1 -> 'Option B', ..."""
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return f"Option {letters}"


def price_option(items: Sequence[LineItem], option: PaymentOption, label: str = "Option A") -> OptionPricing:
    """Full breakdown for one payment option."""
    one_time = subtotal(items, ItemKind.ONE_TIME)
    recurring = subtotal(items, ItemKind.RECURRING)
    discount = discount_amount(one_time, option.discount_percent)
    total = option_total(one_time, option)

    return OptionPricing(
        option_id=option.id,
        label=label,
        payment_method_id=option.payment_method_id,
        discount_percent=option.discount_percent,
        installments=option.installments,
        has_down_payment=option.has_down_payment,
        payment_terms=option.payment_terms,
        subtotal_one_time_cents=one_time,
        discount_cents=discount,
        total_one_time_cents=total,
        subtotal_recurring_cents=recurring,
        installment_cents=installment_amount(total, option.installments),
        installment_schedule_cents=installment_schedule(total, option.installments),
        installment_description=describe_installments(option.installments, option.has_down_payment),
    )


def price_quote(items: Sequence[LineItem], options: Sequence[PaymentOption]) -> QuotePricing:
    """
    Price every option on a quote.

    Options must already be normalized (see core.payment_plan.normalize).
    With no options the editor headline is the undiscounted one-time
    subtotal plus recurring.
    """
    one_time = subtotal(items, ItemKind.ONE_TIME)
    recurring = subtotal(items, ItemKind.RECURRING)

    breakdowns = [
        price_option(items, option, option_label(index))
        for index, option in enumerate(options)
    ]

    headline_one_time = breakdowns[0].total_one_time_cents if breakdowns else Decimal(one_time)

    return QuotePricing(
        subtotal_one_time_cents=one_time,
        subtotal_recurring_cents=recurring,
        options=breakdowns,
        editor_headline_cents=headline_one_time + recurring,
    )
