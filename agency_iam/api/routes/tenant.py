from fastapi import APIRouter, Depends, status

from agency_iam.api.error import http_error
from agency_iam.app.services import UnitOfWork
from agency_iam.app.use_cases.tenants import GetTenantUseCase, TenantResponse
from agency_iam.depends import get_identity, get_unit_of_work

router = APIRouter(prefix="/tenant", tags=["Tenant"])


@router.get("", status_code=status.HTTP_200_OK, response_model=TenantResponse)
async def get_tenant(
    identity: str = Depends(get_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Return the caller's own tenant and its settings"""
    result = await GetTenantUseCase(uow).execute(identity)
    if result.is_err():
        raise http_error(result.error)
    return result.value
