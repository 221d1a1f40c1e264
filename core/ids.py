"""Short, human-typeable quote ids."""

import secrets

# No 0/O or 1/I: ids are read aloud and typed by hand.
QUOTE_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
QUOTE_ID_LENGTH = 6


def generate_quote_id() -> str:
    """Uniform random 6-character id. Uniqueness is the caller's concern."""
    return "".join(secrets.choice(QUOTE_ID_ALPHABET) for _ in range(QUOTE_ID_LENGTH))


def normalize_quote_id(quote_id: str) -> str:
    """Canonical form for comparison and lookup (trimmed, upper case)."""
    return quote_id.strip().upper()
