"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from api.view import create_view_router
from auth.config import AuthConfig
from auth.security_middleware import OperatorMiddleware
from auth.types import IdentityProvider
from clients.postgres_client import PostgresClient
from clients.vault_client import get_database_url, get_share_password
from core.audit import AuditLogger
from core.repositories import QuoteRepository
from core.services.catalog_service import CatalogService
from core.services.payment_method_service import PaymentMethodService
from core.services.quote_service import QuoteService

logger = logging.getLogger(__name__)


def build_services(postgres: PostgresClient, config: AuthConfig) -> dict:
    """Wire services over one Postgres client."""
    audit = AuditLogger(postgres)
    payment_methods = PaymentMethodService(postgres, audit)

    return {
        "quote": QuoteService(QuoteRepository(postgres), audit, payment_methods, config),
        "payment_method": payment_methods,
        "catalog": CatalogService(postgres, audit),
    }


def create_app(
    services: dict,
    identity_provider: IdentityProvider,
    config: AuthConfig | None = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        services: {"quote": QuoteService, "payment_method": PaymentMethodService,
                   "catalog": CatalogService}
        identity_provider: Resolves operator session tokens
        config: Share-link settings
    """
    config = config or AuthConfig()

    app = FastAPI(title=config.app_name)
    app.add_middleware(OperatorMiddleware, identity_provider=identity_provider)
    register_error_handlers(app)

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services, config), prefix="/api")
    app.include_router(create_view_router(services, config), prefix="/api")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    logger.info("API application created")
    return app


def create_app_from_vault(identity_provider: IdentityProvider, app_base_url: str | None = None) -> FastAPI:
    """
    Production entry point: secrets from Vault, services over Postgres.

    Raises:
        VaultError: Secrets unavailable
        PersistenceError: Database unreachable
    """
    settings = {"share_password": get_share_password()}
    if app_base_url:
        settings["app_base_url"] = app_base_url
    config = AuthConfig(**settings)

    postgres = PostgresClient(get_database_url())
    return create_app(build_services(postgres, config), identity_provider, config)
