"""
Payment plan normalization.

Quotes come in two shapes: a list of payment options, or (older records) a
single flat payment_method_id. PaymentPlan names the two shapes explicitly
and normalize() collapses both into a list of PaymentOption so the pricing
engine only ever sees one.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from core.models import (
    DEFAULT_FALLBACK_METHOD,
    FALLBACK_PAYMENT_METHODS,
    PaymentMethod,
    PaymentOption,
    Quote,
)

logger = logging.getLogger(__name__)

LEGACY_OPTION_PREFIX = "legacy-"


@dataclass(frozen=True)
class SingleMethod:
    """Legacy plan: one payment method, no option list."""

    method_id: str
    installments: int = 1
    has_down_payment: bool = False


@dataclass(frozen=True)
class Options:
    """Current plan: an ordered list of selectable options."""

    options: tuple[PaymentOption, ...]


PaymentPlan = Union[SingleMethod, Options]


def plan_for(quote: Quote) -> PaymentPlan:
    """Detect which payment shape a quote carries."""
    if quote.payment_options:
        return Options(tuple(quote.payment_options))
    if quote.payment_method_id:
        return SingleMethod(
            method_id=quote.payment_method_id,
            installments=quote.installments or 1,
            has_down_payment=bool(quote.has_down_payment),
        )
    return Options(())


def resolve_method(method_id: str, methods: Sequence[PaymentMethod] = ()) -> PaymentMethod:
    """
    Find a payment method by id.

    Looks in stored methods first, then the fixed fallback list. Unknown ids
    resolve to the default fallback method so legacy quotes always render.
    """
    for method in list(methods) + FALLBACK_PAYMENT_METHODS:
        if method.id == method_id:
            return method

    logger.warning(
        f"Payment method '{method_id}' not found, using '{DEFAULT_FALLBACK_METHOD.id}'"
    )
    return DEFAULT_FALLBACK_METHOD


def legacy_option_id(method_id: str) -> str:
    return f"{LEGACY_OPTION_PREFIX}{method_id}"


def normalize(plan: PaymentPlan, methods: Sequence[PaymentMethod] = ()) -> list[PaymentOption]:
    """
    Convert any plan into the option list the pricing engine expects.

    A SingleMethod becomes exactly one implicit option carrying the method's
    discount. An Options plan is returned as-is, order preserved.
    """
    if isinstance(plan, SingleMethod):
        method = resolve_method(plan.method_id, methods)
        return [
            PaymentOption(
                id=legacy_option_id(plan.method_id),
                payment_method_id=method.id,
                installments=plan.installments,
                has_down_payment=plan.has_down_payment,
                discount_percent=method.discount_percent,
            )
        ]

    return list(plan.options)


def quote_options(quote: Quote, methods: Sequence[PaymentMethod] = ()) -> list[PaymentOption]:
    """Shortcut: normalized options for a quote."""
    return normalize(plan_for(quote), methods)


def option_from_method(method: PaymentMethod, installments: int = 1, has_down_payment: bool = False) -> PaymentOption:
    """New option for a method, with the method's discount copied as the default."""
    return PaymentOption(
        payment_method_id=method.id,
        installments=installments,
        has_down_payment=has_down_payment,
        discount_percent=method.discount_percent,
    )
