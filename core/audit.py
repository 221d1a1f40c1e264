"""
Append-only audit trail for quote and reference data changes.

Every create, save and status change is recorded with who did it:
the operator's email, or CLIENT_ACTOR for approvals that arrive through a
share link.
"""

from enum import Enum
from typing import Any
from uuid import uuid4

from clients.postgres_client import PostgresClient
from utils.timezone import now_utc

CLIENT_ACTOR = "client"


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_CHANGE = "status_change"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Field-level diff between two entity states.

    Args:
        old: Previous state (model_dump(mode="json"))
        new: New state (model_dump(mode="json"))
        exclude_fields: Fields to ignore (defaults to {"updated_at"})

    Returns:
        {field: {"old": old_val, "new": new_val}} for changed fields.
    """
    exclude = exclude_fields or {"updated_at"}
    changes = {}

    for key in sorted(set(old) | set(new)):
        if key in exclude:
            continue
        old_val = old.get(key)
        new_val = new.get(key)
        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class AuditLogger:
    """
    Writes audit_log rows.

    Pass pydantic models through model_dump(mode="json") so Decimals, dates
    and enums land as JSON-compatible values.

    Usage:
        audit.log_change(
            entity_type="quote",
            entity_id=quote.id,
            action=AuditAction.STATUS_CHANGE,
            changes={"status": {"old": "SENT", "new": "APPROVED"}},
            actor=CLIENT_ACTOR,
        )
    """

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def log_change(
        self,
        entity_type: str,
        entity_id: str,
        action: AuditAction,
        changes: dict[str, Any],
        actor: str
    ) -> None:
        """
        Record one change.

        Changes format by action:
        - CREATE: {"created": {full entity data}}
        - UPDATE / STATUS_CHANGE: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}
        """
        self.postgres.execute(
            """
            INSERT INTO audit_log (id, actor, entity_type, entity_id, action, changes, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            """,
            (
                str(uuid4()),
                actor,
                entity_type,
                str(entity_id),
                action.value,
                changes,
                now_utc()
            )
        )

    def get_entity_history(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        """Audit entries for one entity, newest first."""
        return self.postgres.execute(
            """
            SELECT id, actor, entity_type, entity_id, action, changes, created_at
            FROM audit_log
            WHERE entity_type = %s AND entity_id = %s
            ORDER BY created_at DESC
            """,
            (entity_type, str(entity_id))
        )
