"""Quote aggregate models.

The quote owns its line items and payment options. Legacy records carry a
single flat payment_method_id instead of a payment_options list; both
shapes load into the same model and are normalized before pricing
(see core.payment_plan).
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from core.models.line_item import MAX_AMOUNT_CENTS, LineItem
from core.models.payment import MAX_INSTALLMENTS, PaymentOption

MAX_PRODUCTION_DAYS = 3650


class QuoteStatus(str, Enum):
    """Quote lifecycle status."""

    DRAFT = "DRAFT"
    SENT = "SENT"
    APPROVED = "APPROVED"
    EXPIRED = "EXPIRED"


class LayoutType(str, Enum):
    """Client-facing presentation style. Rendering only."""

    SIMPLE = "SIMPLE"
    PREMIUM = "PREMIUM"


class Briefing(BaseModel):
    title: str = Field(..., max_length=200)
    text: str = Field(..., max_length=5000)


class Highlight(BaseModel):
    id: str
    title: str = Field(..., max_length=200)
    description: str = Field("", max_length=2000)


class TimelineStep(BaseModel):
    id: str
    step: int = Field(..., ge=1)
    title: str = Field(..., max_length=200)
    description: str = Field("", max_length=2000)
    duration: str | None = Field(None, max_length=100)


class MaintenancePlan(BaseModel):
    id: str
    title: str = Field(..., max_length=200)
    price_cents: int = Field(..., ge=0, le=MAX_AMOUNT_CENTS)
    description: str = Field("", max_length=2000)


class OptionalFeature(BaseModel):
    id: str
    title: str = Field(..., max_length=200)
    price_cents: int = Field(..., ge=0, le=MAX_AMOUNT_CENTS)
    description: str = Field("", max_length=2000)
    features: list[str] = Field(default_factory=list)


class QuoteContent(BaseModel):
    """Free-form presentational content. Never read by the pricing engine."""

    briefing: Briefing | None = None
    highlights: list[Highlight] = Field(default_factory=list)
    features: list[Highlight] = Field(default_factory=list)
    timeline: list[TimelineStep] = Field(default_factory=list)
    maintenance: list[MaintenancePlan] = Field(default_factory=list)
    optional_features: list[OptionalFeature] = Field(default_factory=list)


class Quote(BaseModel):
    """
    Full quote as edited and stored.

    client_name may be empty while the operator is still typing; the
    lifecycle save step rejects it. Field bounds that can never be valid
    (negative production days) are rejected on construction.
    """

    id: str = Field(..., min_length=1, max_length=32)
    client_name: str = Field("", max_length=255)
    client_email: str | None = Field(None, max_length=255)
    service_description: str | None = Field(None, max_length=2000)
    user_email: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    valid_until: date
    production_days: int = Field(0, ge=0, le=MAX_PRODUCTION_DAYS)
    items: list[LineItem] = Field(default_factory=list)
    payment_options: list[PaymentOption] | None = None
    # Legacy single-method fields
    payment_method_id: str | None = None
    installments: int | None = Field(None, ge=1, le=MAX_INSTALLMENTS)
    has_down_payment: bool | None = None
    selected_payment_option_id: str | None = None
    status: QuoteStatus = QuoteStatus.DRAFT
    layout_type: LayoutType | None = None
    content: QuoteContent | None = None

    model_config = {"from_attributes": True, "str_strip_whitespace": True}

    @property
    def is_legacy(self) -> bool:
        """Whether the quote predates payment options (flat method id only)."""
        return not self.payment_options and self.payment_method_id is not None

    @property
    def option_ids(self) -> list[str]:
        """Ids of the quote's payment options, in display order."""
        return [option.id for option in self.payment_options or []]

    @property
    def is_approved(self) -> bool:
        return self.status == QuoteStatus.APPROVED
