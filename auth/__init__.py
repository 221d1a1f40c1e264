"""Operator identity and client share-link access."""

from auth.exceptions import (
    AuthError,
    AuthorizationGapError,
    InvalidSharePasswordError,
)
from auth.types import (
    Operator,
    IdentityProvider,
    ShareUnlockRequest,
    ApprovalRequest,
)
from auth.config import AuthConfig
from auth.share import share_link, share_message, check_share_password
from auth.security_middleware import OperatorMiddleware, current_operator
