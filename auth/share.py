"""Share link and password gate for client-facing quote views."""

import hmac

from auth.config import AuthConfig
from auth.exceptions import InvalidSharePasswordError
from core.ids import normalize_quote_id


def share_link(base_url: str, quote_id: str) -> str:
    """Client deep link: <origin>/#/view/<id>."""
    return f"{base_url.rstrip('/')}/#/view/{normalize_quote_id(quote_id)}"


def share_message(config: AuthConfig, quote_id: str) -> str:
    """Copyable message with the link and the shared password."""
    link = share_link(config.app_base_url, quote_id)
    return (
        "Hello! Here is the link to your commercial proposal:\n\n"
        f"{link}\n\n"
        f"Access password: {config.share_password}"
    )


def password_matches(config: AuthConfig, given: str | None) -> bool:
    if not given:
        return False
    return hmac.compare_digest(given.encode("utf-8"), config.share_password.encode("utf-8"))


def check_share_password(config: AuthConfig, given: str | None) -> None:
    """
    Raises:
        InvalidSharePasswordError: If the password does not match.
    """
    if not password_matches(config, given):
        raise InvalidSharePasswordError()
