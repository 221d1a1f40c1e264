"""Typed exceptions for quote operations.

Each class answers a different question for the caller:
- QuoteValidationError: fix your input
- QuoteNotFoundError: nothing with that id
- PersistenceError: input was fine, the store failed, try again
- InvalidTransitionError: the quote's status does not allow this
"""


class QuoteError(Exception):
    """Base class for quote domain errors."""


class QuoteValidationError(QuoteError):
    """
    Input failed validation. Nothing was persisted.

    Carries every problem found so the operator can fix them in one pass.
    """

    def __init__(self, errors: list[str] | str):
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


class QuoteNotFoundError(QuoteError):
    """No quote exists with the requested id."""

    def __init__(self, quote_id: str):
        self.quote_id = quote_id
        super().__init__(f"Quote {quote_id} not found")


class PersistenceError(QuoteError):
    """
    The data store call failed (network, server, constraint).

    Retryable from the caller's side. The core never retries on its own.
    """


class InvalidTransitionError(QuoteError):
    """Requested lifecycle transition is not allowed from the current status."""

    def __init__(self, current: str, target: str, reason: str | None = None):
        self.current = current
        self.target = target
        message = f"Cannot move quote from {current} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
