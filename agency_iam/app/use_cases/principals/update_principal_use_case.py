"""
Update Principal Use Case

Applies a profile patch to a principal under the principal update rule.
"""

import logging
from datetime import datetime
from uuid import UUID

from agency_iam.app.errors import (
    NOT_FOUND,
    EmailTaken,
    conflict,
    denied,
    guard_datastore,
)
from agency_iam.app.policy import check_write, denial_reason
from agency_iam.app.services import AuditRecorder, ContextResolver, UnitOfWork
from agency_iam.domain.entities import Operation
from agency_iam.libs.result import Result, Return

from .dtos import PrincipalPatch, PrincipalResponse

logger = logging.getLogger(__name__)


class UpdatePrincipalUseCase:
    """
    Use case for updating a principal.

    Business Rules:
    - A principal may edit its own profile but never its own role, status
      or tenant
    - A tenant_admin may edit principals of its own tenant, role and status
      included, except its own role and status
    - tenant_id is never changed through this path
    - A rejected patch changes nothing (no partial application)
    - Audit records only the fields that actually changed; a no-op patch
      writes no audit record
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self, identity: str, principal_id: UUID, patch: PrincipalPatch
    ) -> Result[PrincipalResponse]:
        """
        Execute update principal use case.

        Args:
            identity: Caller identity from the identity provider
            principal_id: Principal to update
            patch: Fields to change

        Returns:
            Result with the updated principal, or Error
        """
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)

            principal = await self.uow.principals.get_by_id(context, principal_id)
            if principal is None:
                reason = NOT_FOUND if context.is_resolved else denial_reason(context)
                return Return.err(denied(reason))

            changes = {
                field: value
                for field, value in patch.changes().items()
                if getattr(principal, field) != value
            }
            if not changes:
                return Return.ok(PrincipalResponse.from_entity(principal))

            previous = {field: getattr(principal, field) for field in changes}
            for field, value in changes.items():
                setattr(principal, field, value)

            # Raises PolicyViolation before anything reaches the datastore
            check_write(principal, Operation.update, context, previous=previous)

            principal.updated_at = datetime.utcnow()
            try:
                principal = await self.uow.principals.update(context, principal)
            except EmailTaken:
                await self.uow.rollback()
                return Return.err(conflict("Email already in use"))
            await self.uow.commit()

            response = PrincipalResponse.from_entity(principal)
            await self.audit.record(
                actor_id=context.identity,
                tenant_id=principal.tenant_id,
                entity_type="principal",
                entity_id=principal.id,
                action="update",
                old_values=previous,
                new_values=changes,
            )
            return Return.ok(response)
