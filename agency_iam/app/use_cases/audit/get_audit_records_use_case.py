"""
Get Audit Records Use Case

Retrieves the audit trail of the caller's tenant with pagination.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from agency_iam.app.errors import FORBIDDEN, NO_CONTEXT, denied, guard_datastore
from agency_iam.app.services import ContextResolver, UnitOfWork
from agency_iam.domain.entities import AuditRecord
from agency_iam.libs.result import Result, Return


class AuditRecordResponse(BaseModel):
    """Single audit record in response"""

    id: str
    actor_id: Optional[str] = None
    entity_type: str
    entity_id: str
    action: str
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any]
    timestamp: str

    @classmethod
    def from_entity(cls, record: AuditRecord) -> "AuditRecordResponse":
        return cls(
            id=str(record.id),
            actor_id=str(record.actor_id) if record.actor_id else None,
            entity_type=record.entity_type,
            entity_id=str(record.entity_id),
            action=record.action,
            old_values=record.old_values,
            new_values=record.new_values,
            metadata=record.event_metadata or {},
            timestamp=record.created_at.isoformat(),
        )


class AuditRecordsResponse(BaseModel):
    """Page of audit records"""

    records: List[AuditRecordResponse]
    next_cursor: Optional[str] = None


class GetAuditRecordsUseCase:
    """
    Use case for reading the tenant audit trail.

    Business Rules:
    - Caller must be a tenant_admin with a resolved context
    - Only records of the caller's tenant
    - Newest first, cursor-based pagination
    - Optional filter on entity type and entity id
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(
        self,
        identity: str,
        limit: int = 50,
        cursor: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> Result[AuditRecordsResponse]:
        """
        Execute get audit records use case.

        Args:
            identity: Caller identity from the identity provider
            limit: Maximum number of records to return
            cursor: Pagination cursor (optional)
            entity_type: Only records about this entity type
            entity_id: Only records about this entity

        Returns:
            Result with records and next_cursor, or Error
        """
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))
            if not context.is_admin:
                return Return.err(denied(FORBIDDEN))

            records, next_cursor = await self.uow.audit_records.get_by_tenant_paginated(
                context,
                limit=limit,
                cursor=cursor,
                entity_type=entity_type,
                entity_id=entity_id,
            )

            return Return.ok(
                AuditRecordsResponse(
                    records=[AuditRecordResponse.from_entity(r) for r in records],
                    next_cursor=next_cursor,
                )
            )
