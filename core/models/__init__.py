"""Core domain models."""

from core.models.line_item import MAX_AMOUNT_CENTS, ItemKind, LineItem, LineItemCreate
from core.models.payment import (
    PaymentMethod,
    PaymentMethodCreate,
    PaymentOption,
    MAX_INSTALLMENTS,
    FALLBACK_PAYMENT_METHODS,
    DEFAULT_FALLBACK_METHOD,
)
from core.models.service import Service, ServiceCreate
from core.models.quote import (
    Quote,
    QuoteStatus,
    MAX_PRODUCTION_DAYS,
    QuoteContent,
    LayoutType,
    Briefing,
    Highlight,
    TimelineStep,
    MaintenancePlan,
    OptionalFeature,
)

__all__ = [
    # LineItem
    "ItemKind", "LineItem", "LineItemCreate", "MAX_AMOUNT_CENTS",
    # Payment
    "PaymentMethod", "PaymentMethodCreate", "PaymentOption", "MAX_INSTALLMENTS",
    "FALLBACK_PAYMENT_METHODS", "DEFAULT_FALLBACK_METHOD",
    # Service
    "Service", "ServiceCreate",
    # Quote
    "Quote", "QuoteStatus", "QuoteContent", "LayoutType", "MAX_PRODUCTION_DAYS",
    "Briefing", "Highlight", "TimelineStep", "MaintenancePlan", "OptionalFeature",
]
