"""Quote line item models.

Amounts are stored in cents (integer) so subtotals never drift.
R$ 10,00 = 1000 cents.
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

# Largest accepted amount (R$ 10 trilhões), well inside BIGINT
MAX_AMOUNT_CENTS = 10**15


class ItemKind(str, Enum):
    """How a line item is billed."""

    ONE_TIME = "ONE_TIME"    # Project price, billed once
    RECURRING = "RECURRING"  # Monthly charge, never discounted


class LineItemCreate(BaseModel):
    """Data required to add a line item to a quote."""

    description: str = Field(..., min_length=1, max_length=500)
    amount_cents: int = Field(..., ge=0, le=MAX_AMOUNT_CENTS)
    kind: ItemKind = ItemKind.ONE_TIME

    model_config = {"str_strip_whitespace": True}


class LineItem(BaseModel):
    """A line item as held on a quote. Replaced, never mutated in place."""

    id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1, max_length=500)
    amount_cents: int = Field(..., ge=0, le=MAX_AMOUNT_CENTS)
    kind: ItemKind

    model_config = {"frozen": True, "str_strip_whitespace": True, "from_attributes": True}

    @classmethod
    def from_create(cls, data: LineItemCreate) -> "LineItem":
        """Build a line item with a fresh id."""
        return cls(id=uuid4().hex, **data.model_dump())
