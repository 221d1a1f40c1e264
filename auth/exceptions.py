"""Typed exceptions for auth failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class AuthorizationGapError(AuthError):
    """
    An operator-only action was reached without operator identity.

    Must block the action; never fall back to anonymous behaviour.
    """

    def __init__(self, action: str = "this action"):
        self.action = action
        super().__init__(f"Operator login required for {action}")


class InvalidSharePasswordError(AuthError):
    """Wrong password on a share link."""

    def __init__(self):
        super().__init__("Invalid share password")
