"""Pydantic models and protocols for the operator identity boundary."""

from typing import Protocol

from pydantic import BaseModel, EmailStr, Field


class Operator(BaseModel):
    """A logged-in operator, as supplied by the identity provider."""

    email: EmailStr
    name: str = Field("", max_length=255)


class IdentityProvider(Protocol):
    """
    External identity service.

    Resolves an opaque session token to the operator behind it, or None if
    the token is unknown or expired. Authentication itself happens there.
    """

    def resolve(self, token: str) -> Operator | None:
        ...


class ShareUnlockRequest(BaseModel):
    """Payload for opening a shared quote."""

    password: str = Field("", max_length=200)


class ApprovalRequest(BaseModel):
    """Payload for a client approving a shared quote."""

    password: str = Field("", max_length=200)
    option_id: str | None = None
