"""
Delete Principal Use Case
"""

from uuid import UUID

from pydantic import BaseModel

from agency_iam.app.errors import NOT_FOUND, denied, guard_datastore
from agency_iam.app.policy import denial_reason
from agency_iam.app.services import (
    PRINCIPAL_FIELDS,
    AuditRecorder,
    ContextResolver,
    UnitOfWork,
    snapshot,
)
from agency_iam.libs.result import Result, Return


class DeletePrincipalResponse(BaseModel):
    """Response for delete principal use case"""

    status: str
    principal_id: str


class DeletePrincipalUseCase:
    """
    Use case for removing a principal.

    Business Rules:
    - Caller must be a tenant_admin of the principal's tenant
    - An admin can never delete itself
    - Audited as "delete" with the old snapshot
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self, identity: str, principal_id: UUID
    ) -> Result[DeletePrincipalResponse]:
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)

            principal = await self.uow.principals.get_by_id(context, principal_id)
            if principal is None:
                reason = NOT_FOUND if context.is_resolved else denial_reason(context)
                return Return.err(denied(reason))

            old_values = snapshot(principal, PRINCIPAL_FIELDS)
            tenant_id = principal.tenant_id

            await self.uow.principals.delete(context, principal)
            await self.uow.commit()

            await self.audit.record(
                actor_id=context.identity,
                tenant_id=tenant_id,
                entity_type="principal",
                entity_id=principal_id,
                action="delete",
                old_values=old_values,
            )
            return Return.ok(
                DeletePrincipalResponse(status="deleted", principal_id=str(principal_id))
            )
