"""
Payment method reference data.

Methods are managed independently of quotes. Quotes copy a method's
discount into their payment options, so deactivating or re-pricing a
method never changes a quote already built. Deletion is soft (active =
false) because legacy quotes still point at method ids.
"""

import logging
from uuid import uuid4

from auth.types import Operator
from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.models import PaymentMethod, PaymentMethodCreate

logger = logging.getLogger(__name__)


class PaymentMethodService:
    """Service for payment method operations."""

    def __init__(self, postgres: PostgresClient, audit: AuditLogger):
        self.postgres = postgres
        self.audit = audit

    def create(self, data: PaymentMethodCreate, operator: Operator) -> PaymentMethod:
        """
        Register a payment method.

        Args:
            data: Method name, default discount and active flag
            operator: Operator creating the method

        Returns:
            Created payment method
        """
        row = self.postgres.execute_returning(
            """
            INSERT INTO payment_methods (id, name, discount_percent, active)
            VALUES (%s, %s, %s, %s)
            RETURNING *
            """,
            (str(uuid4()), data.name, data.discount_percent, data.active)
        )[0]

        method = PaymentMethod.model_validate(row)

        self.audit.log_change(
            entity_type="payment_method",
            entity_id=method.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json")},
            actor=operator.email,
        )

        return method

    def get_by_id(self, method_id: str) -> PaymentMethod | None:
        row = self.postgres.execute_single(
            "SELECT * FROM payment_methods WHERE id = %s",
            (method_id,)
        )

        if row is None:
            return None

        return PaymentMethod.model_validate(row)

    def list_active(self) -> list[PaymentMethod]:
        """Active methods ordered by name. These are offered in the editor."""
        rows = self.postgres.execute(
            "SELECT * FROM payment_methods WHERE active = true ORDER BY name ASC"
        )
        return [PaymentMethod.model_validate(row) for row in rows]

    def list_all(self) -> list[PaymentMethod]:
        """
        Every method including inactive ones.

        Legacy quotes resolve their method from this list.
        """
        rows = self.postgres.execute(
            "SELECT * FROM payment_methods ORDER BY name ASC"
        )
        return [PaymentMethod.model_validate(row) for row in rows]

    def delete(self, method_id: str, operator: Operator) -> bool:
        """
        Deactivate a payment method.

        Returns:
            True if deactivated, False if not found or already inactive
        """
        current = self.get_by_id(method_id)
        if current is None or not current.active:
            return False

        self.postgres.execute(
            "UPDATE payment_methods SET active = false WHERE id = %s",
            (method_id,)
        )

        self.audit.log_change(
            entity_type="payment_method",
            entity_id=method_id,
            action=AuditAction.DELETE,
            changes={"active": {"old": True, "new": False}},
            actor=operator.email,
        )

        return True
