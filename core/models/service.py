"""Service catalog models.

A catalog service is a reusable line item template. Importing one into a
quote copies description, amount and kind verbatim.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from core.models.line_item import MAX_AMOUNT_CENTS, ItemKind


class ServiceCreate(BaseModel):
    """Data required to add a service to the catalog."""

    description: str = Field(..., min_length=1, max_length=500)
    amount_cents: int = Field(..., ge=0, le=MAX_AMOUNT_CENTS)
    kind: ItemKind = ItemKind.ONE_TIME

    model_config = {"str_strip_whitespace": True}


class Service(BaseModel):
    """Full catalog service as stored."""

    id: str
    description: str
    amount_cents: int
    kind: ItemKind
    user_email: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
