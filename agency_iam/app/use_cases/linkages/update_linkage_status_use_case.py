"""
Update Linkage Status Use Case

Moves an active linkage to completed or cancelled.
"""

from datetime import datetime
from uuid import UUID

from agency_iam.app.errors import NO_CONTEXT, denied, guard_datastore, validation_error
from agency_iam.app.services import AuditRecorder, ContextResolver, UnitOfWork
from agency_iam.domain.entities import LinkageStatus
from agency_iam.libs.result import Error, Result, Return

from .dtos import LinkageResponse

# Allowed transitions: active -> completed | cancelled, nothing else
ALLOWED_TRANSITIONS = {
    LinkageStatus.active: {LinkageStatus.completed, LinkageStatus.cancelled},
}


class UpdateLinkageStatusUseCase:
    """
    Use case for linkage status transitions.

    Business Rules:
    - Only active -> completed and active -> cancelled are allowed
    - Linkages outside the caller's tenant are indistinguishable from missing ones
    - A terminated linkage is never reactivated in place
    - Audited as "update" with old/new status
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self, identity: str, linkage_id: UUID, new_status: str
    ) -> Result[LinkageResponse]:
        try:
            target_status = LinkageStatus(new_status)
        except ValueError:
            return Return.err(
                validation_error(
                    f"Invalid status: {new_status}. Must be one of: "
                    + ", ".join(s.value for s in LinkageStatus)
                )
            )

        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            linkage = await self.uow.linkages.get_by_id(context, linkage_id)
            if linkage is None:
                return Return.err(denied())

            old_status = linkage.status
            if target_status not in ALLOWED_TRANSITIONS.get(old_status, set()):
                return Return.err(
                    Error(
                        "INVALID_STATUS_TRANSITION",
                        f"Cannot move linkage from {old_status.value} to {target_status.value}",
                    )
                )

            linkage.status = target_status
            linkage.updated_at = datetime.utcnow()
            linkage = await self.uow.linkages.update(context, linkage)
            await self.uow.commit()

            response = LinkageResponse.from_entity(linkage)
            await self.audit.record(
                actor_id=context.identity,
                tenant_id=context.tenant_id,
                entity_type="linkage",
                entity_id=linkage.id,
                action="update",
                old_values={"status": old_status},
                new_values={"status": target_status},
            )
            return Return.ok(response)
