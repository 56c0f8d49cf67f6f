"""
Get Tenant Use Case

Returns the caller's own tenant.
"""

from agency_iam.app.errors import NO_CONTEXT, denied, guard_datastore
from agency_iam.app.services import ContextResolver, UnitOfWork
from agency_iam.libs.result import Result, Return

from .dtos import TenantResponse


class GetTenantUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(self, identity: str) -> Result[TenantResponse]:
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            tenant = await self.uow.tenants.get(context, context.tenant_id)
            if tenant is None:
                return Return.err(denied())

            return Return.ok(TenantResponse.from_entity(tenant))
