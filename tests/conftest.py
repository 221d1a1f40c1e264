"""Shared test fixtures for the quote engine test suite."""

from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
from clients.vault_client import reset_vault_cache
reset_vault_cache()

from auth.types import Operator
from core.ids import normalize_quote_id
from core.models import ItemKind, LineItem, PaymentOption, Quote, QuoteStatus
from utils.timezone import now_utc


# =============================================================================
# TEST OPERATOR CONSTANTS
# =============================================================================

TEST_OPERATOR_EMAIL = "operator@example.com"
TEST_OPERATOR_B_EMAIL = "operator-b@example.com"


@pytest.fixture
def operator() -> Operator:
    """The primary test operator."""
    return Operator(email=TEST_OPERATOR_EMAIL, name="Test Operator")


@pytest.fixture
def operator_b() -> Operator:
    """A second operator, for ownership checks."""
    return Operator(email=TEST_OPERATOR_B_EMAIL, name="")


# =============================================================================
# DOMAIN FACTORIES
# =============================================================================


@pytest.fixture
def make_item():
    """Factory for line items. Amounts in cents."""
    counter = {"n": 0}

    def _make(amount_cents: int, kind: ItemKind = ItemKind.ONE_TIME, description: str = "Item", id: str | None = None):
        counter["n"] += 1
        return LineItem(
            id=id or f"item-{counter['n']}",
            description=description,
            amount_cents=amount_cents,
            kind=kind,
        )

    return _make


@pytest.fixture
def make_option():
    """Factory for payment options."""

    def _make(id: str, discount: str = "0", installments: int = 1, has_down_payment: bool = False, method: str = "pix"):
        return PaymentOption(
            id=id,
            payment_method_id=method,
            installments=installments,
            has_down_payment=has_down_payment,
            discount_percent=Decimal(discount),
        )

    return _make


@pytest.fixture
def scenario_items(make_item):
    """Design R$ 1.000,00 once plus Hosting R$ 50,00 per month."""
    return [
        make_item(100000, ItemKind.ONE_TIME, "Design", id="design"),
        make_item(5000, ItemKind.RECURRING, "Hosting", id="hosting"),
    ]


@pytest.fixture
def make_quote(scenario_items, make_option):
    """
    Factory for quotes that pass save validation.

    Defaults: client "Acme", the scenario items, one 5% PIX option, DRAFT.
    Any field can be overridden.
    """

    def _make(**overrides):
        fields = {
            "id": "AB23CD",
            "client_name": "Acme",
            "client_email": "contact@acme.example.com",
            "user_email": TEST_OPERATOR_EMAIL,
            "created_at": now_utc(),
            "valid_until": date.today() + timedelta(days=15),
            "production_days": 15,
            "items": list(scenario_items),
            "payment_options": [make_option("opt-a", discount="5")],
            "status": QuoteStatus.DRAFT,
        }
        fields.update(overrides)
        return Quote(**fields)

    return _make


@pytest.fixture
def two_option_quote(make_quote, make_option):
    """Option A: 5% once. Option B: no discount, 3 installments."""
    return make_quote(
        status=QuoteStatus.SENT,
        payment_options=[
            make_option("opt-a", discount="5", installments=1),
            make_option("opt-b", discount="0", installments=3, method="credit_card"),
        ],
    )


@pytest.fixture
def legacy_quote(make_quote):
    """Record from before payment options: a flat PIX method id only."""
    return make_quote(
        id="LEG4CY",
        status=QuoteStatus.SENT,
        payment_options=None,
        payment_method_id="pix",
        installments=1,
        has_down_payment=False,
    )


# =============================================================================
# IN-MEMORY REPOSITORY
# =============================================================================


class InMemoryQuoteRepository:
    """QuoteRepository stand-in backed by a dict. Same contract, no database."""

    def __init__(self):
        self.rows: dict[str, Quote] = {}

    def save(self, quote: Quote) -> Quote:
        quote_id = normalize_quote_id(quote.id)
        existing = self.rows.get(quote_id)
        update = {"id": quote_id}
        if existing is not None:
            update["created_at"] = existing.created_at
            update["user_email"] = existing.user_email
        stored = quote.model_copy(update=update)
        self.rows[quote_id] = stored
        return stored

    def get(self, quote_id: str) -> Quote | None:
        return self.rows.get(normalize_quote_id(quote_id))

    def exists(self, quote_id: str) -> bool:
        return normalize_quote_id(quote_id) in self.rows

    def list_all(self) -> list[Quote]:
        return sorted(self.rows.values(), key=lambda q: q.created_at, reverse=True)

    def search(self, query: str) -> list[Quote]:
        needle = query.strip().lower()
        return [q for q in self.list_all() if needle in q.client_name.lower() or needle in q.id.lower()]

    def update_status(self, quote_id, status, selected_option_id=None, updated_at=None, from_statuses=None):
        quote_id = normalize_quote_id(quote_id)
        current = self.rows.get(quote_id)
        if current is None:
            return None
        if from_statuses is not None and current.status not in from_statuses:
            return None
        updated = current.model_copy(update={
            "status": status,
            "selected_payment_option_id": selected_option_id,
            "updated_at": updated_at or current.updated_at,
        })
        self.rows[quote_id] = updated
        return updated


@pytest.fixture
def quote_repository():
    return InMemoryQuoteRepository()
