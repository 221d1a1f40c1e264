"""Persistence boundary for quotes."""

from core.repositories.quote_repository import QuoteRepository
