"""
Linkage API Routes

Reconciler and tenant-scoped linkage endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from agency_iam.api.error import http_error
from agency_iam.app.services import AuditRecorder, UnitOfWork
from agency_iam.app.use_cases.linkages import (
    AttachLinkageDocumentUseCase,
    FindOrCreateLinkageUseCase,
    GetLinkageDocumentUseCase,
    GetLinkageUseCase,
    LinkageDocumentResponse,
    LinkageListResponse,
    LinkageResponse,
    LinkageResult,
    ListLinkagesUseCase,
    UpdateLinkageStatusUseCase,
)
from agency_iam.depends import get_audit_recorder, get_identity, get_unit_of_work

router = APIRouter(prefix="/linkages", tags=["Linkages"])


class FindOrCreateLinkageRequest(BaseModel):
    subject_id: UUID = Field(..., description="Subject of the linkage (e.g. student)")
    target_id: UUID = Field(..., description="Target of the linkage (e.g. branch)")
    descriptor: str = Field(..., max_length=255, description="e.g. program name")
    consumer: Optional[str] = Field(
        None, max_length=100, description="Calling flow, recorded on the audit trail"
    )


class UpdateLinkageStatusRequest(BaseModel):
    status: str = Field(..., description="completed or cancelled")


class AttachDocumentRequest(BaseModel):
    document_ref: str = Field(..., max_length=1024, description="Storage locator")
    document_name: Optional[str] = Field(None, max_length=255)


@router.post("", response_model=LinkageResult)
async def find_or_create_linkage(
    request: FindOrCreateLinkageRequest,
    response: Response,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Find or create a linkage for (subject, target, descriptor).

    Returns 201 with reused=false when a linkage was created, 200 with
    reused=true when an active one already existed.

    Raises:
        - 400 Bad Request: Empty descriptor
        - 401 Unauthorized: Invalid or expired token
        - 404 Not Found: Caller has no tenant context
        - 409 Conflict: Concurrent modification, retry
        - 503 Service Unavailable: Datastore unavailable
    """
    use_case = FindOrCreateLinkageUseCase(uow, audit)
    result = await use_case.execute(
        identity,
        request.subject_id,
        request.target_id,
        request.descriptor,
        consumer=request.consumer,
    )
    if result.is_err():
        raise http_error(result.error)

    response.status_code = (
        status.HTTP_200_OK if result.value.reused else status.HTTP_201_CREATED
    )
    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=LinkageListResponse)
async def list_linkages(
    subject_id: Optional[UUID] = Query(None),
    target_id: Optional[UUID] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListLinkagesUseCase(uow).execute(
        identity, subject_id=subject_id, target_id=target_id, status=status_filter
    )
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.get(
    "/{linkage_id}", status_code=status.HTTP_200_OK, response_model=LinkageResponse
)
async def get_linkage(
    linkage_id: UUID,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetLinkageUseCase(uow).execute(identity, linkage_id)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.patch(
    "/{linkage_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=LinkageResponse,
)
async def update_linkage_status(
    linkage_id: UUID,
    request: UpdateLinkageStatusRequest,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Move an active linkage to completed or cancelled.

    Raises:
        - 400 Bad Request: Unknown status
        - 404 Not Found: Linkage not visible
        - 409 Conflict: INVALID_STATUS_TRANSITION
    """
    result = await UpdateLinkageStatusUseCase(uow, audit).execute(
        identity, linkage_id, request.status
    )
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.put(
    "/{linkage_id}/document",
    status_code=status.HTTP_200_OK,
    response_model=LinkageResponse,
)
async def attach_linkage_document(
    linkage_id: UUID,
    request: AttachDocumentRequest,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    result = await AttachLinkageDocumentUseCase(uow, audit).execute(
        identity, linkage_id, request.document_ref, request.document_name
    )
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.get(
    "/{linkage_id}/document",
    status_code=status.HTTP_200_OK,
    response_model=LinkageDocumentResponse,
)
async def get_linkage_document(
    linkage_id: UUID,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetLinkageDocumentUseCase(uow).execute(identity, linkage_id)
    if result.is_err():
        raise http_error(result.error)
    return result.value
