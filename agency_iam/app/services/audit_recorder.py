"""
Audit Recorder

Appends one immutable AuditRecord per accepted mutation. Writing is
best-effort: the record goes through its own unit of work after the
primary transaction commits, and failures are reported on the
``agency_iam.audit`` logger instead of reaching the caller.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

from agency_iam.app.services.unit_of_work import UnitOfWorkFactory
from agency_iam.domain.entities import AuditRecord

audit_logger = logging.getLogger("agency_iam.audit")

# Fields captured in old/new snapshots per entity type
TENANT_FIELDS = ("name", "contact_email", "contact_phone", "currency", "timezone")
PRINCIPAL_FIELDS = ("tenant_id", "email", "full_name", "role", "status")
LINKAGE_FIELDS = (
    "tenant_id",
    "subject_id",
    "target_id",
    "descriptor",
    "status",
    "document_ref",
    "document_name",
)


def json_safe(value: Any) -> Any:
    """Convert a column value into something the JSON column accepts"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [json_safe(v) for v in value]
    return value


def snapshot(entity: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Capture the given fields of an entity as a JSON-safe dict"""
    return {field: json_safe(getattr(entity, field)) for field in fields}


class AuditRecorder:
    """
    Writes audit records in a separate, privileged unit of work.

    Business Rules:
    - Called after the primary commit, before the result is returned
    - Never raises: a failed write is logged, the mutation stands
    - No update or delete path exists
    """

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    async def record(
        self,
        actor_id: Optional[UUID],
        tenant_id: Optional[UUID],
        entity_type: str,
        entity_id: UUID,
        action: str,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Append one audit record.

        Args:
            actor_id: Principal performing the action (None for system actions)
            tenant_id: Tenant the entity belongs to
            entity_type: e.g. "linkage", "principal", "tenant"
            entity_id: ID of the affected entity
            action: e.g. "create", "update", "delete", "reuse"
            old_values: Snapshot before the change (None for creations)
            new_values: Snapshot after the change (None for deletions)
            metadata: Free-form context (consumer, reason, ...)
        """
        record = AuditRecord(
            actor_id=actor_id,
            tenant_id=tenant_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            old_values=json_safe(old_values) if old_values is not None else None,
            new_values=json_safe(new_values) if new_values is not None else None,
            event_metadata=json_safe(metadata) if metadata else None,
        )

        try:
            async with self.uow_factory() as uow:
                await uow.audit_records.create(record)
                await uow.commit()
        except Exception:
            # Audit failures must never surface to the caller or undo the mutation
            audit_logger.exception(
                f"Failed to write audit record: action={action} "
                f"entity={entity_type}:{entity_id} tenant={tenant_id} actor={actor_id}"
            )
