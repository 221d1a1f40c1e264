"""Tests for editor operations on in-memory quotes."""

from decimal import Decimal

import pytest

from core.editing import (
    add_item,
    add_line_item,
    add_payment_option,
    remove_item,
    remove_payment_option,
    update_payment_option,
)
from core.exceptions import InvalidTransitionError, QuoteValidationError
from core.models import ItemKind, LineItemCreate, PaymentMethod, QuoteStatus


@pytest.fixture
def pix():
    return PaymentMethod(id="pix", name="PIX", discount_percent=Decimal("5"))


class TestItems:

    def test_add_item_returns_new_quote(self, make_quote):
        quote = make_quote()

        updated = add_item(quote, LineItemCreate(description="Logo", amount_cents=30000))

        assert len(updated.items) == 3
        assert len(quote.items) == 2
        assert updated.items[-1].kind == ItemKind.ONE_TIME

    def test_add_line_item_rejects_duplicate_id(self, make_quote, make_item):
        with pytest.raises(QuoteValidationError, match="duplicate"):
            add_line_item(make_quote(), make_item(100, id="design"))

    def test_remove_item(self, make_quote):
        updated = remove_item(make_quote(), "hosting")

        assert [i.id for i in updated.items] == ["design"]

    def test_remove_missing_item(self, make_quote):
        with pytest.raises(QuoteValidationError, match="no line item"):
            remove_item(make_quote(), "ghost")

    def test_approved_quote_locked(self, make_quote):
        quote = make_quote(status=QuoteStatus.APPROVED, selected_payment_option_id="opt-a")

        with pytest.raises(InvalidTransitionError):
            add_item(quote, LineItemCreate(description="Late", amount_cents=1))


class TestPaymentOptions:

    def test_add_copies_method_discount(self, make_quote, pix):
        updated = add_payment_option(make_quote(payment_options=None), pix, installments=2)

        assert len(updated.payment_options) == 1
        assert updated.payment_options[0].discount_percent == Decimal("5")
        assert updated.payment_options[0].installments == 2

    def test_add_replaces_legacy_method(self, legacy_quote, pix):
        updated = add_payment_option(legacy_quote, pix)

        assert updated.payment_method_id is None
        assert not updated.is_legacy

    def test_update_keeps_hand_edited_discount(self, make_quote):
        quote = make_quote()
        edited = quote.payment_options[0].model_copy(update={"discount_percent": Decimal("12")})

        updated = update_payment_option(quote, edited)

        assert updated.payment_options[0].discount_percent == Decimal("12")

    def test_update_unknown_option(self, make_quote, make_option):
        with pytest.raises(QuoteValidationError):
            update_payment_option(make_quote(), make_option("ghost"))

    def test_remove(self, two_option_quote):
        updated = remove_payment_option(two_option_quote, "opt-a")

        assert updated.option_ids == ["opt-b"]

    def test_remove_unknown(self, two_option_quote):
        with pytest.raises(QuoteValidationError):
            remove_payment_option(two_option_quote, "ghost")

    def test_expired_quote_locked(self, make_quote, pix):
        with pytest.raises(InvalidTransitionError):
            add_payment_option(make_quote(status=QuoteStatus.EXPIRED), pix)
