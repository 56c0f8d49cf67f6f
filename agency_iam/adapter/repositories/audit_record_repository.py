import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlmodel import select

from agency_iam.app.policy import scope
from agency_iam.app.repositories.audit_record_repository import IAuditRecordRepository
from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import AuditRecord

from .base import SqlModelRepository


class AuditRecordRepository(SqlModelRepository, IAuditRecordRepository):
    """AuditRecord repository implementation using SQLModel"""

    async def create(self, audit_record: AuditRecord) -> AuditRecord:
        """Append a new audit record (immutable)"""
        return await self._save(audit_record)

    async def get_by_tenant_paginated(
        self,
        context: CallerContext,
        limit: int = 50,
        cursor: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[UUID] = None,
    ) -> Tuple[List[AuditRecord], Optional[str]]:
        """
        Get audit records of the caller's tenant with cursor-based pagination.

        Cursor format: base64-encoded ISO timestamp of created_at
        """
        stmt = scope(select(AuditRecord), AuditRecord, context)

        if entity_type is not None:
            stmt = stmt.where(AuditRecord.entity_type == entity_type)
        if entity_id is not None:
            stmt = stmt.where(AuditRecord.entity_id == entity_id)

        if cursor:
            try:
                cursor_timestamp_str = base64.b64decode(cursor).decode("utf-8")
                cursor_timestamp = datetime.fromisoformat(cursor_timestamp_str)
                stmt = stmt.where(AuditRecord.created_at < cursor_timestamp)
            except (ValueError, TypeError):
                # Invalid cursor, ignore and return from beginning
                pass

        # Newest first, one extra row tells whether another page exists
        stmt = stmt.order_by(AuditRecord.created_at.desc()).limit(limit + 1)

        result = await self._execute(stmt)
        records = list(result.scalars().all())

        has_more = len(records) > limit
        if has_more:
            records = records[:limit]

        next_cursor = None
        if has_more and records:
            cursor_timestamp_str = records[-1].created_at.isoformat()
            next_cursor = base64.b64encode(cursor_timestamp_str.encode("utf-8")).decode(
                "utf-8"
            )

        return records, next_cursor
