"""
Audit API Routes

Handles audit record retrieval endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from agency_iam.api.error import http_error
from agency_iam.app.services import UnitOfWork
from agency_iam.app.use_cases.audit import AuditRecordsResponse, GetAuditRecordsUseCase
from agency_iam.depends import get_identity, get_unit_of_work
from config import ApplicationConfig

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get(
    "/records",
    status_code=status.HTTP_200_OK,
    response_model=AuditRecordsResponse,
)
async def get_audit_records(
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(
        50,
        ge=1,
        le=ApplicationConfig.AUDIT_PAGE_LIMIT,
        description="Maximum number of records to return",
    ),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
    entity_type: Optional[str] = Query(None, description="e.g. linkage, principal"),
    entity_id: Optional[UUID] = Query(None),
):
    """
    Get the audit trail of the caller's tenant.

    Only accessible by tenant admins.

    Returns:
        - records: Audit records ordered by newest first
        - next_cursor: Cursor for next page (null if no more records)

    Raises:
        - 401 Unauthorized: Invalid or expired token
        - 404 Not Found: Caller is not a tenant admin
        - 500 Internal Server Error: Server error
    """
    result = await GetAuditRecordsUseCase(uow).execute(
        identity,
        limit=limit,
        cursor=cursor,
        entity_type=entity_type,
        entity_id=entity_id,
    )
    if result.is_err():
        raise http_error(result.error)
    return result.value
