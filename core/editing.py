"""
Editor operations on an in-memory quote.

Each function returns a new Quote and leaves the input untouched. All of
them refuse to touch an APPROVED or EXPIRED quote; the only way to change
such a quote is QuoteService.reopen.
"""

from core.exceptions import QuoteValidationError
from core.lifecycle import ensure_editable
from core.models import LineItem, LineItemCreate, PaymentMethod, PaymentOption, Quote
from core.payment_plan import option_from_method


def add_item(quote: Quote, data: LineItemCreate) -> Quote:
    ensure_editable(quote)
    return quote.model_copy(update={"items": [*quote.items, LineItem.from_create(data)]})


def add_line_item(quote: Quote, item: LineItem) -> Quote:
    """Append an already-built item (e.g. imported from the catalog)."""
    ensure_editable(quote)
    if any(existing.id == item.id for existing in quote.items):
        raise QuoteValidationError(f"items: duplicate line item id '{item.id}'")
    return quote.model_copy(update={"items": [*quote.items, item]})


def remove_item(quote: Quote, item_id: str) -> Quote:
    ensure_editable(quote)
    remaining = [item for item in quote.items if item.id != item_id]
    if len(remaining) == len(quote.items):
        raise QuoteValidationError(f"items: no line item with id '{item_id}'")
    return quote.model_copy(update={"items": remaining})


def add_payment_option(
    quote: Quote,
    method: PaymentMethod,
    installments: int = 1,
    has_down_payment: bool = False,
) -> Quote:
    """
    Offer a payment method on the quote.

    The new option starts with the method's discount; a legacy single
    method, if any, is dropped in favour of the option list.
    """
    ensure_editable(quote)
    option = option_from_method(method, installments, has_down_payment)
    return quote.model_copy(update={
        "payment_options": [*(quote.payment_options or []), option],
        "payment_method_id": None,
        "installments": None,
        "has_down_payment": None,
    })


def update_payment_option(quote: Quote, option: PaymentOption) -> Quote:
    """Replace the option with the same id (e.g. a hand-edited discount)."""
    ensure_editable(quote)
    options = quote.payment_options or []
    if option.id not in quote.option_ids:
        raise QuoteValidationError(f"payment_options: no payment option with id '{option.id}'")
    updated = [option if existing.id == option.id else existing for existing in options]
    return quote.model_copy(update={"payment_options": updated})


def remove_payment_option(quote: Quote, option_id: str) -> Quote:
    ensure_editable(quote)
    options = quote.payment_options or []
    remaining = [option for option in options if option.id != option_id]
    if len(remaining) == len(options):
        raise QuoteValidationError(f"payment_options: no payment option with id '{option_id}'")
    return quote.model_copy(update={"payment_options": remaining})
