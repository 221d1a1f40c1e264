"""API test fixtures: full app over an in-memory quote store."""

from decimal import Decimal
from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from auth.config import AuthConfig
from core.audit import AuditLogger
from core.models import PaymentMethod
from core.services.catalog_service import CatalogService
from core.services.payment_method_service import PaymentMethodService
from core.services.quote_service import QuoteService

SHARE_PASSWORD = "open-sesame"


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def config():
    return AuthConfig(app_base_url="https://propostas.example.com", share_password=SHARE_PASSWORD)


@pytest.fixture
def audit():
    return Mock(spec=AuditLogger)


@pytest.fixture
def payment_method_service():
    mock = Mock(spec=PaymentMethodService)
    pix = PaymentMethod(id="pix", name="PIX", discount_percent=Decimal("5"))
    card = PaymentMethod(id="card", name="Card", discount_percent=Decimal("0"), active=False)
    mock.list_all.return_value = [card, pix]
    mock.list_active.return_value = [pix]
    return mock


@pytest.fixture
def catalog_service():
    return Mock(spec=CatalogService)


@pytest.fixture
def quote_service(quote_repository, audit, payment_method_service, config):
    return QuoteService(quote_repository, audit, payment_method_service, config)


@pytest.fixture
def services(quote_service, payment_method_service, catalog_service):
    return {
        "quote": quote_service,
        "payment_method": payment_method_service,
        "catalog": catalog_service,
    }


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def identity_provider(operator):
    provider = Mock()
    provider.resolve.side_effect = lambda token: operator if token == "test-token" else None
    return provider


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services, identity_provider, config):
    return create_app(services, identity_provider, config)


@pytest.fixture
def client(app):
    """Operator test client."""
    c = TestClient(app, raise_server_exceptions=False)
    c.cookies.set("session_token", "test-token")
    return c


@pytest.fixture
def unauthed_client(app):
    """Client-side test client (no session cookie)."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def stored_quote(quote_repository, two_option_quote):
    """Two-option SENT quote already in storage."""
    return quote_repository.save(two_option_quote)
