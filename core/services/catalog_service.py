"""
Catalog service for reusable quote items.

Operators keep a catalog of services they sell. Importing a service into a
quote copies its description, amount and kind into a new line item; later
catalog edits never reach quotes already built.
"""

import logging
from uuid import uuid4

from auth.types import Operator
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.models import LineItem, Service, ServiceCreate
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class CatalogService:
    """Service for catalog operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: ServiceCreate, operator: Operator) -> Service:
        """
        Add a service to the catalog, stamped with the operator's email.

        Args:
            data: Service creation data
            operator: Operator creating the entry

        Returns:
            Created service
        """
        row = self.postgres.execute_returning(
            """
            INSERT INTO services (id, description, amount_cents, kind, user_email, created_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *
            """,
            (
                str(uuid4()), data.description, data.amount_cents,
                data.kind.value, operator.email, now_utc()
            )
        )[0]

        service = Service.model_validate(row)

        self.audit.log_change(
            entity_type="service",
            entity_id=service.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json")},
            actor=operator.email,
        )

        return service

    def get_by_id(self, service_id: str) -> Service | None:
        """
        Get service by ID.

        Returns:
            Service if found, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM services WHERE id = %s",
            (service_id,)
        )

        if row is None:
            return None

        return Service.model_validate(row)

    def list_all(self) -> list[Service]:
        """All catalog services, newest first."""
        rows = self.postgres.execute(
            "SELECT * FROM services ORDER BY created_at DESC"
        )
        return [Service.model_validate(row) for row in rows]

    def delete(self, service_id: str, operator: Operator) -> bool:
        """
        Remove a service from the catalog.

        Returns:
            True if deleted, False if not found
        """
        current = self.get_by_id(service_id)
        if current is None:
            return False

        self.postgres.execute(
            "DELETE FROM services WHERE id = %s",
            (service_id,)
        )

        self.audit.log_change(
            entity_type="service",
            entity_id=service_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")},
            actor=operator.email,
        )

        return True

    @staticmethod
    def to_line_item(service: Service) -> LineItem:
        """Copy a catalog service into a new quote line item."""
        return LineItem(
            id=uuid4().hex,
            description=service.description,
            amount_cents=service.amount_cents,
            kind=service.kind,
        )
