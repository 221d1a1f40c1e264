"""Share-link and quote defaults configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Settings for share links and new-quote defaults.

    share_password is a single static secret printed on every share
    message. It is a convenience gate for clients, not access control.
    """

    app_base_url: str = Field(
        default="http://localhost:5173",
        description="Origin the client-facing viewer is served from",
    )
    app_name: str = Field(
        default="Quotes",
        description="Name used in share messages",
    )
    share_password: str = Field(
        default="boraprosperar",
        description="Shared password for client share links",
        min_length=4,
        max_length=200,
    )

    # New-quote defaults
    quote_validity_days: int = Field(
        default=15,
        description="Days from today until a new quote's valid_until",
        ge=1,
        le=365,
    )
    default_production_days: int = Field(
        default=15,
        description="Production days pre-filled on a new quote",
        ge=0,
        le=365,
    )
    business_timezone: str = Field(
        default="America/Sao_Paulo",
        description="IANA timezone used for calendar dates shown to clients",
    )

