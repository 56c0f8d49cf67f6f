"""
Get / List Principal Use Cases
"""

from typing import Optional
from uuid import UUID

from agency_iam.app.errors import NOT_FOUND, denied, guard_datastore, validation_error
from agency_iam.app.policy import denial_reason
from agency_iam.app.services import ContextResolver, UnitOfWork
from agency_iam.domain.entities import PrincipalStatus
from agency_iam.libs.result import Result, Return

from .dtos import PrincipalListResponse, PrincipalResponse


class GetPrincipalUseCase:
    """
    Read one principal.

    Visible: principals of the caller's tenant, and the caller itself even
    without a resolved context.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(
        self, identity: str, principal_id: UUID
    ) -> Result[PrincipalResponse]:
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)

            principal = await self.uow.principals.get_by_id(context, principal_id)
            if principal is None:
                reason = NOT_FOUND if context.is_resolved else denial_reason(context)
                return Return.err(denied(reason))

            return Return.ok(PrincipalResponse.from_entity(principal))


class ListPrincipalsUseCase:
    """List the principals visible to the caller, optionally by status"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(
        self, identity: str, status: Optional[str] = None
    ) -> Result[PrincipalListResponse]:
        status_filter = None
        if status is not None:
            try:
                status_filter = PrincipalStatus(status)
            except ValueError:
                return Return.err(validation_error(f"Invalid status: {status}"))

        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)

            principals = await self.uow.principals.list_by_tenant(
                context, status=status_filter
            )
            return Return.ok(
                PrincipalListResponse(
                    principals=[PrincipalResponse.from_entity(p) for p in principals]
                )
            )
