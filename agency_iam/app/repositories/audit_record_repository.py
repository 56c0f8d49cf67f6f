from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import AuditRecord


class IAuditRecordRepository(ABC):
    """AuditRecord repository interface - application layer"""

    @abstractmethod
    async def create(self, audit_record: AuditRecord) -> AuditRecord:
        """Append a new audit record (immutable)"""
        pass

    @abstractmethod
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

        Returns:
            Tuple of (records list, next_cursor)
            - records: List of audit records ordered by created_at DESC
            - next_cursor: Cursor for next page, None if no more records
        """
        pass
