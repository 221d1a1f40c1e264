"""
Quote persistence.

One row per quote in the `quotes` table. Items, payment options and
presentational content are JSONB columns; everything else is a plain
column. Ids are stored upper case and looked up case-insensitively.

Failures from the driver arrive as PersistenceError (see PostgresClient).
A missing quote is None, never an exception, at this layer.
"""

import logging
from datetime import datetime
from typing import Iterable

from clients.postgres_client import PostgresClient
from core.ids import normalize_quote_id
from core.models import Quote, QuoteStatus

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id", "client_name", "client_email", "service_description", "user_email",
    "created_at", "updated_at", "valid_until", "production_days",
    "items", "payment_options", "payment_method_id", "installments",
    "has_down_payment", "selected_payment_option_id", "status",
    "layout_type", "content",
)

# Never overwritten on upsert
_IMMUTABLE_COLUMNS = {"id", "created_at", "user_email"}


def _row_params(quote: Quote) -> tuple:
    data = quote.model_dump(mode="json")
    data["id"] = normalize_quote_id(quote.id)
    data["created_at"] = quote.created_at
    data["updated_at"] = quote.updated_at
    data["valid_until"] = quote.valid_until
    return tuple(data[column] for column in _COLUMNS)


class QuoteRepository:
    """Quote storage over PostgresClient."""

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def save(self, quote: Quote) -> Quote:
        """
        Insert or replace a quote. Last write wins.

        created_at and user_email of an existing row are kept.

        Returns:
            The quote as stored.
        """
        placeholders = ", ".join(["%s"] * len(_COLUMNS))
        assignments = ", ".join(
            f"{column} = EXCLUDED.{column}"
            for column in _COLUMNS
            if column not in _IMMUTABLE_COLUMNS
        )

        row = self.postgres.execute_returning(
            f"""
            INSERT INTO quotes ({', '.join(_COLUMNS)})
            VALUES ({placeholders})
            ON CONFLICT (id) DO UPDATE SET {assignments}
            RETURNING *
            """,
            _row_params(quote)
        )[0]

        logger.debug(f"Quote {row['id']} saved with status {row['status']}")
        return Quote.model_validate(row)

    def get(self, quote_id: str) -> Quote | None:
        """
        Get quote by id, ignoring case.

        Returns:
            Quote if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM quotes WHERE id = %s",
            (normalize_quote_id(quote_id),)
        )

        if row is None:
            return None

        return Quote.model_validate(row)

    def exists(self, quote_id: str) -> bool:
        """Whether any quote already uses this id."""
        found = self.postgres.execute_scalar(
            "SELECT EXISTS (SELECT 1 FROM quotes WHERE id = %s)",
            (normalize_quote_id(quote_id),)
        )
        return bool(found)

    def list_all(self) -> list[Quote]:
        """All quotes, newest first."""
        rows = self.postgres.execute(
            "SELECT * FROM quotes ORDER BY created_at DESC"
        )
        return [Quote.model_validate(row) for row in rows]

    def search(self, query: str) -> list[Quote]:
        """
        Quotes whose client name or id contains the query, newest first.

        Uses ILIKE for case-insensitive partial matching.
        """
        pattern = f"%{query.strip()}%"

        rows = self.postgres.execute(
            """
            SELECT * FROM quotes
            WHERE client_name ILIKE %s
               OR id ILIKE %s
            ORDER BY created_at DESC
            """,
            (pattern, pattern)
        )
        return [Quote.model_validate(row) for row in rows]

    def update_status(
        self,
        quote_id: str,
        status: QuoteStatus,
        selected_option_id: str | None = None,
        updated_at: datetime | None = None,
        from_statuses: Iterable[QuoteStatus] | None = None,
    ) -> Quote | None:
        """
        Set status and selected option without touching items or options.

        With from_statuses, the row only changes if its stored status is one
        of them, so a transition decided on a stale read cannot land.

        Returns:
            Updated quote, or None if no quote has that id (or, with
            from_statuses, its status no longer allows the move).
        """
        params = [status.value, selected_option_id, updated_at, normalize_quote_id(quote_id)]
        guard = ""
        if from_statuses is not None:
            guard = " AND status = ANY(%s)"
            params.append(sorted(s.value for s in from_statuses))

        rows = self.postgres.execute_returning(
            f"""
            UPDATE quotes
            SET status = %s, selected_payment_option_id = %s,
                updated_at = COALESCE(%s, updated_at)
            WHERE id = %s{guard}
            RETURNING *
            """,
            tuple(params)
        )

        if not rows:
            return None

        return Quote.model_validate(rows[0])
