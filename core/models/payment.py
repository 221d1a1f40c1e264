"""Payment method and payment option models.

Discounts are percentages (0-100) held as Decimal. A payment option copies
its method's discount when created; after that the option's own value is
the one that prices the quote.
"""

from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field

MAX_INSTALLMENTS = 360


class PaymentMethodCreate(BaseModel):
    """Data required to register a payment method."""

    name: str = Field(..., min_length=1, max_length=100)
    discount_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    active: bool = True


class PaymentMethod(BaseModel):
    """A payment method as stored (reference data)."""

    id: str
    name: str
    discount_percent: Decimal = Field(..., ge=0, le=100)
    active: bool = True

    model_config = {"from_attributes": True}


class PaymentOption(BaseModel):
    """One selectable way for the client to pay a quote."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    payment_method_id: str = Field(..., min_length=1)
    installments: int = Field(1, ge=1, le=MAX_INSTALLMENTS)
    has_down_payment: bool = False
    discount_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    payment_terms: str | None = Field(None, max_length=500)

    model_config = {"from_attributes": True}


# Used when a legacy quote references a method id that is not in stored data.
FALLBACK_PAYMENT_METHODS: list[PaymentMethod] = [
    PaymentMethod(id="pix", name="PIX", discount_percent=Decimal("5")),
    PaymentMethod(id="credit_card", name="Cartão de Crédito", discount_percent=Decimal("0")),
    PaymentMethod(id="boleto", name="Boleto Bancário", discount_percent=Decimal("0")),
]

DEFAULT_FALLBACK_METHOD = FALLBACK_PAYMENT_METHODS[1]
