"""
Get Me Use Case

Loads the caller's own principal, its tenant and the resolved context.
"""

from agency_iam.app.errors import NO_CONTEXT, denied, guard_datastore
from agency_iam.app.services import ContextResolver, UnitOfWork
from agency_iam.libs.result import Result, Return

from .dtos import ContextInfo, MeResponse, PrincipalResponse, TenantSummary


class GetMeUseCase:
    """
    Use case for loading the current principal.

    Business Rules:
    - A principal can always read its own record, even when its context
      does not resolve (e.g. suspended)
    - The tenant is included only for a resolved context
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(self, identity: str) -> Result[MeResponse]:
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if context.identity is None:
                return Return.err(denied(NO_CONTEXT))

            principal = await self.uow.principals.get_by_id(context, context.identity)
            if principal is None:
                return Return.err(denied(NO_CONTEXT))

            tenant = None
            if context.is_resolved:
                tenant = await self.uow.tenants.get(context, context.tenant_id)

            return Return.ok(
                MeResponse(
                    principal=PrincipalResponse.from_entity(principal),
                    tenant=TenantSummary.from_entity(tenant) if tenant else None,
                    context=ContextInfo.from_context(context),
                )
            )
