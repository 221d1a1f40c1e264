"""
Quote lifecycle rules.

    DRAFT <-> SENT --approve--> APPROVED
    DRAFT / SENT --expire--> EXPIRED
    APPROVED / EXPIRED --reopen--> DRAFT

Functions here only decide; they never persist. QuoteService applies the
outcome. Every rejected move raises synchronously.
"""

from core.exceptions import InvalidTransitionError, QuoteValidationError
from core.models import Quote, QuoteStatus
from core.payment_plan import SingleMethod, legacy_option_id, plan_for

EDITABLE_STATUSES = frozenset({QuoteStatus.DRAFT, QuoteStatus.SENT})
APPROVABLE_STATUSES = frozenset({QuoteStatus.DRAFT, QuoteStatus.SENT})
EXPIRABLE_STATUSES = frozenset({QuoteStatus.DRAFT, QuoteStatus.SENT})
REOPENABLE_STATUSES = frozenset({QuoteStatus.APPROVED, QuoteStatus.EXPIRED})


def validation_errors(quote: Quote) -> list[str]:
    """Every reason the quote cannot be saved. Empty list means valid."""
    errors = []

    if not quote.client_name.strip():
        errors.append("client_name: client name is required")

    if not quote.items:
        errors.append("items: add at least one line item")

    plan = plan_for(quote)
    if isinstance(plan, SingleMethod):
        has_option = True
    else:
        has_option = len(plan.options) > 0
    if not has_option:
        errors.append("payment_options: add at least one payment option")

    item_ids = [item.id for item in quote.items]
    if len(item_ids) != len(set(item_ids)):
        errors.append("items: line item ids must be unique")

    option_ids = quote.option_ids
    if len(option_ids) != len(set(option_ids)):
        errors.append("payment_options: payment option ids must be unique")

    if (
        quote.selected_payment_option_id is not None
        and quote.payment_options
        and quote.selected_payment_option_id not in option_ids
    ):
        errors.append("selected_payment_option_id: does not match any payment option")

    return errors


def validate_for_save(quote: Quote) -> None:
    """
    Raises:
        QuoteValidationError: With every problem found.
    """
    errors = validation_errors(quote)
    if errors:
        raise QuoteValidationError(errors)


def ensure_editable(quote: Quote) -> None:
    """
    Items and payment options may only change in DRAFT or SENT.

    Raises:
        InvalidTransitionError: If the quote is APPROVED or EXPIRED.
    """
    if quote.status not in EDITABLE_STATUSES:
        raise InvalidTransitionError(
            quote.status.value, "edit", "reopen the quote before editing"
        )


def status_after_save(quote: Quote, as_draft: bool) -> QuoteStatus:
    """
    Status a valid save lands in.

    Raises:
        InvalidTransitionError: If the quote is not editable.
        QuoteValidationError: If required fields are missing.
    """
    ensure_editable(quote)
    validate_for_save(quote)
    return QuoteStatus.DRAFT if as_draft else QuoteStatus.SENT


def resolve_approval(quote: Quote, option_id: str | None) -> tuple[str | None, bool]:
    """
    Check a client approval and resolve the option to record.

    Returns:
        (option id to store, already_approved). already_approved means the
        same choice was confirmed before and nothing should change.

    Raises:
        QuoteValidationError: If the option does not belong to the quote.
        InvalidTransitionError: If the quote cannot be approved, or is
            already approved with a different option.
    """
    plan = plan_for(quote)

    if isinstance(plan, SingleMethod):
        if option_id not in (None, legacy_option_id(plan.method_id)):
            raise QuoteValidationError(
                f"option_id: '{option_id}' is not a payment option of quote {quote.id}"
            )
        resolved = None
    else:
        if not plan.options:
            raise QuoteValidationError(
                f"payment_options: quote {quote.id} has no payment options to approve"
            )
        if option_id is None:
            raise QuoteValidationError("option_id: select a payment option to approve")
        if option_id not in quote.option_ids:
            raise QuoteValidationError(
                f"option_id: '{option_id}' is not a payment option of quote {quote.id}"
            )
        resolved = option_id

    if quote.status == QuoteStatus.APPROVED:
        if quote.selected_payment_option_id != resolved:
            raise InvalidTransitionError(
                quote.status.value,
                QuoteStatus.APPROVED.value,
                "quote is already approved with a different payment option",
            )
        return resolved, True

    if quote.status not in APPROVABLE_STATUSES:
        raise InvalidTransitionError(quote.status.value, QuoteStatus.APPROVED.value)

    return resolved, False


def check_expire(quote: Quote) -> None:
    """
    Raises:
        InvalidTransitionError: Unless the quote is DRAFT or SENT.
    """
    if quote.status not in EXPIRABLE_STATUSES:
        raise InvalidTransitionError(quote.status.value, QuoteStatus.EXPIRED.value)


def check_reopen(quote: Quote) -> None:
    """
    Raises:
        InvalidTransitionError: Unless the quote is APPROVED or EXPIRED.
    """
    if quote.status not in REOPENABLE_STATUSES:
        raise InvalidTransitionError(
            quote.status.value, QuoteStatus.DRAFT.value, "only approved or expired quotes can be reopened"
        )
