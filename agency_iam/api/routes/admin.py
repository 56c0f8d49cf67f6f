"""
Admin API Routes - Provisioning Endpoints

These endpoints are for the agency back office and internal service
integrations. Authentication is via Admin API Key, not principal tokens,
and every use case here runs on the privileged provisioning path.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from agency_iam.api.error import http_error
from agency_iam.api.utils.admin_auth import require_provisioning_key
from agency_iam.app.services import AuditRecorder, UnitOfWork
from agency_iam.app.use_cases.principals import PrincipalResponse
from agency_iam.app.use_cases.provisioning import (
    ProvisionPrincipalCommand,
    ProvisionPrincipalUseCase,
    ProvisionTenantCommand,
    ProvisionTenantUseCase,
    PurgeTenantResponse,
    PurgeTenantUseCase,
    TenantSettingsPatch,
    UpdateTenantSettingsUseCase,
)
from agency_iam.app.use_cases.tenants import TenantResponse
from agency_iam.depends import get_audit_recorder, get_provisioning_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/tenants",
    status_code=status.HTTP_201_CREATED,
    response_model=TenantResponse,
    dependencies=[Depends(require_provisioning_key)],
)
async def provision_tenant(
    command: ProvisionTenantCommand,
    uow: UnitOfWork = Depends(get_provisioning_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Provision Tenant

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 422 Unprocessable Entity: Invalid settings
    """
    result = await ProvisionTenantUseCase(uow, audit).execute(command)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.patch(
    "/tenants/{tenant_id}",
    status_code=status.HTTP_200_OK,
    response_model=TenantResponse,
    dependencies=[Depends(require_provisioning_key)],
)
async def update_tenant_settings(
    tenant_id: UUID,
    patch: TenantSettingsPatch,
    uow: UnitOfWork = Depends(get_provisioning_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Update Tenant Settings (name, contact, currency, timezone)

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await UpdateTenantSettingsUseCase(uow, audit).execute(tenant_id, patch)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.post(
    "/tenants/{tenant_id}/principals",
    status_code=status.HTTP_201_CREATED,
    response_model=PrincipalResponse,
    dependencies=[Depends(require_provisioning_key)],
)
async def provision_principal(
    tenant_id: UUID,
    command: ProvisionPrincipalCommand,
    uow: UnitOfWork = Depends(get_provisioning_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Provision Principal

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: Email already in use
    """
    result = await ProvisionPrincipalUseCase(uow, audit).execute(tenant_id, command)
    if result.is_err():
        raise http_error(result.error)
    return result.value


@router.delete(
    "/tenants/{tenant_id}",
    status_code=status.HTTP_200_OK,
    response_model=PurgeTenantResponse,
    dependencies=[Depends(require_provisioning_key)],
)
async def purge_tenant(
    tenant_id: UUID,
    uow: UnitOfWork = Depends(get_provisioning_unit_of_work),
    audit: AuditRecorder = Depends(get_audit_recorder),
):
    """
    Purge Tenant

    Deletes the tenant with its principals and linkages. Audit records are
    retained.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await PurgeTenantUseCase(uow, audit).execute(tenant_id)
    if result.is_err():
        raise http_error(result.error)
    return result.value
