"""Client-facing share-link endpoints under /api/view.

Public routes: the shared password is the only gate. Operators with a
session skip it. Clients can read a quote and approve it, nothing else.
"""

import logging

from fastapi import APIRouter, Request

from api.base import success_response
from auth.config import AuthConfig
from auth.share import check_share_password
from auth.types import ApprovalRequest, ShareUnlockRequest
from core.models import Quote
from core.pricing import OptionPricing, QuotePricing
from utils.formatting import format_currency

logger = logging.getLogger(__name__)

# Operator-only fields never shown to clients
_CLIENT_HIDDEN_FIELDS = {"user_email"}


def _display(option: OptionPricing) -> dict:
    """Formatted amounts, as the client reads them."""
    return {
        "total": format_currency(option.total_one_time_cents),
        "discount": format_currency(option.discount_cents),
        "installment": format_currency(option.installment_schedule_cents[0]),
        "last_installment": format_currency(option.installment_schedule_cents[-1]),
        "recurring": format_currency(option.subtotal_recurring_cents),
    }


def build_client_view(quote: Quote, pricing: QuotePricing) -> dict:
    """
    Everything the client viewer renders for one quote.

    Once approved nothing stays selectable; the chosen option is
    reported as approved_option and the others remain listed.
    """
    approved_option = None
    if quote.is_approved:
        if quote.selected_payment_option_id is not None:
            approved_option = pricing.for_option(quote.selected_payment_option_id)
        elif pricing.is_single_option:
            approved_option = pricing.options[0]

    if quote.is_approved:
        selectable = []
    else:
        selectable = [option.option_id for option in pricing.options]

    return {
        "quote": quote.model_dump(mode="json", exclude=_CLIENT_HIDDEN_FIELDS),
        "pricing": pricing.model_dump(mode="json"),
        "single_option": pricing.is_single_option,
        "approved_option": approved_option.model_dump(mode="json") if approved_option else None,
        "selectable_option_ids": selectable,
        "display": {option.option_id: _display(option) for option in pricing.options},
    }


def create_view_router(services: dict, config: AuthConfig) -> APIRouter:
    router = APIRouter()

    quote_svc = services["quote"]

    def _check_gate(request: Request, password: str) -> None:
        if getattr(request.state, "operator", None) is not None:
            return
        check_share_password(config, password)

    @router.post("/view/{quote_id}/unlock")
    async def unlock(request: Request, quote_id: str, body: ShareUnlockRequest):
        _check_gate(request, body.password)
        quote = quote_svc.get(quote_id)
        return success_response({"id": quote.id, "unlocked": True}).model_dump(mode="json")

    @router.post("/view/{quote_id}")
    async def view_quote(request: Request, quote_id: str, body: ShareUnlockRequest):
        _check_gate(request, body.password)
        quote = quote_svc.get(quote_id)
        return success_response(
            build_client_view(quote, quote_svc.pricing(quote))
        ).model_dump(mode="json")

    @router.post("/view/{quote_id}/approve")
    async def approve_quote(request: Request, quote_id: str, body: ApprovalRequest):
        _check_gate(request, body.password)
        quote = quote_svc.approve(quote_id, body.option_id)
        logger.info(f"Client approval received for quote {quote.id}")
        return success_response(
            build_client_view(quote, quote_svc.pricing(quote))
        ).model_dump(mode="json")

    return router
