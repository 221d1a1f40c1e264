"""
Quote service: creation, saving and lifecycle transitions.

The operator path (create, save, expire, reopen) always receives the
operator explicitly. The client path (approve) carries no identity; the
share password is checked at the HTTP boundary before it gets here.

Validation happens before any call to the repository, so an invalid quote
never reaches the data store.
"""

import logging

from auth.config import AuthConfig
from auth.exceptions import AuthorizationGapError
from auth.types import Operator
from core import lifecycle
from core.audit import AuditLogger, AuditAction, CLIENT_ACTOR, compute_changes
from core.exceptions import InvalidTransitionError, QuoteNotFoundError
from core.ids import generate_quote_id, normalize_quote_id
from core.models import Quote, QuoteStatus
from core.payment_plan import quote_options
from core.pricing import QuotePricing, price_quote
from core.repositories import QuoteRepository
from core.services.payment_method_service import PaymentMethodService
from utils.timezone import days_from_today, now_utc

logger = logging.getLogger(__name__)


def _require_operator(operator: Operator | None, action: str) -> Operator:
    if operator is None:
        raise AuthorizationGapError(action)
    return operator


class QuoteService:
    """Service for quote operations."""

    def __init__(
        self,
        repository: QuoteRepository,
        audit: AuditLogger,
        payment_methods: PaymentMethodService,
        config: AuthConfig | None = None,
    ):
        self.repository = repository
        self.audit = audit
        self.payment_methods = payment_methods
        self.config = config or AuthConfig()

    def create(self, operator: Operator | None) -> Quote:
        """
        Start a new quote in DRAFT. Nothing is persisted until save().

        Args:
            operator: Operator starting the quote

        Returns:
            Unsaved quote with a fresh id and default dates
        """
        operator = _require_operator(operator, "creating quotes")

        return Quote(
            id=generate_quote_id(),
            created_at=now_utc(),
            valid_until=days_from_today(
                self.config.quote_validity_days, self.config.business_timezone
            ),
            production_days=self.config.default_production_days,
            user_email=operator.email,
            status=QuoteStatus.DRAFT,
        )

    def save(self, quote: Quote, as_draft: bool, operator: Operator | None) -> Quote:
        """
        Validate and persist a quote as DRAFT or SENT.

        Args:
            quote: Quote as edited
            as_draft: Keep as DRAFT (True) or mark SENT (False)
            operator: Operator saving

        Returns:
            Quote as stored

        Raises:
            AuthorizationGapError: No operator
            InvalidTransitionError: Quote is APPROVED/EXPIRED, here or in storage
            QuoteValidationError: Missing client name, items or payment options
            PersistenceError: Store failure (input was valid, retry)
        """
        operator = _require_operator(operator, "saving quotes")

        new_status = lifecycle.status_after_save(quote, as_draft)

        quote_id = normalize_quote_id(quote.id)
        existing = self.repository.get(quote_id)
        if existing is not None:
            # Approved in storage while the operator was editing
            lifecycle.ensure_editable(existing)

        now = now_utc()
        to_store = quote.model_copy(update={
            "id": quote_id,
            "status": new_status,
            "updated_at": now,
            "created_at": existing.created_at if existing else quote.created_at,
            "user_email": (existing.user_email if existing else None) or quote.user_email or operator.email,
        })

        saved = self.repository.save(to_store)

        if existing is None:
            self.audit.log_change(
                entity_type="quote",
                entity_id=saved.id,
                action=AuditAction.CREATE,
                changes={"created": saved.model_dump(mode="json", exclude_none=True)},
                actor=operator.email,
            )
        else:
            changes = compute_changes(
                existing.model_dump(mode="json"),
                saved.model_dump(mode="json"),
            )
            if changes:
                self.audit.log_change(
                    entity_type="quote",
                    entity_id=saved.id,
                    action=AuditAction.UPDATE,
                    changes=changes,
                    actor=operator.email,
                )

        logger.info(f"Quote {saved.id} saved as {saved.status.value} by {operator.email}")
        return saved

    def get(self, quote_id: str) -> Quote:
        """
        Load a quote by id (case-insensitive).

        Raises:
            QuoteNotFoundError: No quote with that id
            PersistenceError: Store failure
        """
        quote = self.repository.get(quote_id)
        if quote is None:
            raise QuoteNotFoundError(normalize_quote_id(quote_id))
        return quote

    def list_all(self) -> list[Quote]:
        """All quotes, newest first."""
        return self.repository.list_all()

    def search(self, query: str) -> list[Quote]:
        """
        Quotes whose client name or id contains the query, ignoring case.

        A blank query lists everything.
        """
        if not query.strip():
            return self.list_all()
        return self.repository.search(query)

    def history(self, quote_id: str) -> list[dict]:
        """
        Audit entries for a quote, newest first.

        Raises:
            QuoteNotFoundError: No quote with that id
        """
        quote_id = normalize_quote_id(quote_id)
        if not self.repository.exists(quote_id):
            raise QuoteNotFoundError(quote_id)
        return self.audit.get_entity_history("quote", quote_id)

    def pricing(self, quote: Quote) -> QuotePricing:
        """
        Price every payment option on the quote.

        Legacy single-method quotes look up their method (including inactive
        ones) so the implicit option carries the right discount.
        """
        methods = self.payment_methods.list_all() if quote.is_legacy else []
        return price_quote(quote.items, quote_options(quote, methods))

    def approve(self, quote_id: str, option_id: str | None) -> Quote:
        """
        Client approval of a quote with one payment option.

        Re-approving with the same option returns the quote unchanged. The
        write only lands while the stored quote is still approvable; if
        another approval got there first, the stored quote is checked again.

        Raises:
            QuoteNotFoundError: No quote with that id
            QuoteValidationError: Option is not on the quote
            InvalidTransitionError: Quote expired, or approved with another option
            PersistenceError: Store failure
        """
        quote = self.get(quote_id)
        resolved_option, already_approved = lifecycle.resolve_approval(quote, option_id)

        if already_approved:
            logger.info(f"Quote {quote.id} already approved, nothing to change")
            return quote

        updated = self.repository.update_status(
            quote.id, QuoteStatus.APPROVED, resolved_option, now_utc(),
            from_statuses=lifecycle.APPROVABLE_STATUSES,
        )
        if updated is None:
            current = self.get(quote.id)
            _, already_approved = lifecycle.resolve_approval(current, option_id)
            if already_approved:
                logger.info(f"Quote {quote.id} was approved concurrently with the same option")
                return current
            raise InvalidTransitionError(
                current.status.value, QuoteStatus.APPROVED.value, "quote changed while approving"
            )

        self.audit.log_change(
            entity_type="quote",
            entity_id=quote.id,
            action=AuditAction.STATUS_CHANGE,
            changes={
                "status": {"old": quote.status.value, "new": QuoteStatus.APPROVED.value},
                "selected_payment_option_id": {"old": quote.selected_payment_option_id, "new": resolved_option},
            },
            actor=CLIENT_ACTOR,
        )

        logger.info(f"Quote {quote.id} approved with option {resolved_option}")
        return updated

    def mark_expired(self, quote_id: str, operator: Operator | None) -> Quote:
        """
        Manually expire a DRAFT or SENT quote. There is no automatic expiry.

        Raises:
            AuthorizationGapError, QuoteNotFoundError, InvalidTransitionError, PersistenceError
        """
        operator = _require_operator(operator, "expiring quotes")
        quote = self.get(quote_id)
        lifecycle.check_expire(quote)
        return self._set_status(
            quote, QuoteStatus.EXPIRED, quote.selected_payment_option_id, operator,
            lifecycle.EXPIRABLE_STATUSES,
        )

    def reopen(self, quote_id: str, operator: Operator | None) -> Quote:
        """
        Admin edit entry point: APPROVED or EXPIRED back to DRAFT.

        Clears the client's selected option; the quote must be sent and
        approved again.

        Raises:
            AuthorizationGapError, QuoteNotFoundError, InvalidTransitionError, PersistenceError
        """
        operator = _require_operator(operator, "reopening quotes")
        quote = self.get(quote_id)
        lifecycle.check_reopen(quote)
        return self._set_status(quote, QuoteStatus.DRAFT, None, operator, lifecycle.REOPENABLE_STATUSES)

    def _set_status(
        self,
        quote: Quote,
        status: QuoteStatus,
        selected_option_id: str | None,
        operator: Operator,
        from_statuses: frozenset[QuoteStatus],
    ) -> Quote:
        updated = self.repository.update_status(
            quote.id, status, selected_option_id, now_utc(), from_statuses=from_statuses
        )
        if updated is None:
            current = self.get(quote.id)
            raise InvalidTransitionError(
                current.status.value, status.value, "quote changed concurrently, reload and try again"
            )

        self.audit.log_change(
            entity_type="quote",
            entity_id=quote.id,
            action=AuditAction.STATUS_CHANGE,
            changes={
                "status": {"old": quote.status.value, "new": status.value},
                "selected_payment_option_id": {"old": quote.selected_payment_option_id, "new": selected_option_id},
            },
            actor=operator.email,
        )

        logger.info(f"Quote {quote.id} moved {quote.status.value} -> {status.value} by {operator.email}")
        return updated
