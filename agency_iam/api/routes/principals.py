"""
Principal API Routes

Self-service and tenant-admin endpoints on principals.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from agency_iam.api.error import http_error
from agency_iam.app.services import AuditRecorder, UnitOfWork
from agency_iam.app.use_cases.principals import (
    DeletePrincipalResponse,
    DeletePrincipalUseCase,
    GetMeUseCase,
    GetPrincipalUseCase,
    ListPrincipalsUseCase,
    MeResponse,
    PrincipalListResponse,
    PrincipalPatch,
    PrincipalResponse,
    UpdatePrincipalUseCase,
)
from agency_iam.depends import get_audit_recorder, get_identity, get_unit_of_work

router = APIRouter(tags=["Principals"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def get_me(
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Load the current principal, its tenant and resolved context.

    Works for principals whose context does not resolve (e.g. suspended):
    they still see their own record, without a tenant.

    Raises:
        - 401 Unauthorized: Invalid or expired token
        - 404 Not Found: No principal for this identity
    """
    result = await GetMeUseCase(uow).execute(identity)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.get(
    "/principals", status_code=status.HTTP_200_OK, response_model=PrincipalListResponse
)
async def list_principals(
    status_filter: Optional[str] = Query(None, alias="status"),
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await ListPrincipalsUseCase(uow).execute(identity, status=status_filter)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.get(
    "/principals/{principal_id}",
    status_code=status.HTTP_200_OK,
    response_model=PrincipalResponse,
)
async def get_principal(
    principal_id: UUID,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await GetPrincipalUseCase(uow).execute(identity, principal_id)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.patch(
    "/principals/{principal_id}",
    status_code=status.HTTP_200_OK,
    response_model=PrincipalResponse,
)
async def update_principal(
    principal_id: UUID,
    patch: PrincipalPatch,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Update a principal.

    Members edit their own profile; tenant admins edit principals of their
    tenant, except their own role.

    Raises:
        - 401 Unauthorized: Invalid or expired token
        - 404 Not Found: Principal not visible, or the change is not allowed
        - 409 Conflict: Email already in use
    """
    result = await UpdatePrincipalUseCase(uow, audit).execute(
        identity, principal_id, patch
    )
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.delete(
    "/principals/{principal_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeletePrincipalResponse,
)
async def delete_principal(
    principal_id: UUID,
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Delete a principal of the caller's tenant (tenant admins only, never self).

    Raises:
        - 401 Unauthorized: Invalid or expired token
        - 404 Not Found: Principal not visible, or the deletion is not allowed
    """
    result = await DeletePrincipalUseCase(uow, audit).execute(identity, principal_id)
    if result.is_err():
        raise http_error(result.error)
    return result.value
