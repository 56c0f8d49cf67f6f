"""
Find Or Create Linkage Use Case

Reconciles a (subject, target, descriptor) request against the caller's
tenant: reuse the active linkage when there is one, create it otherwise.
"""

import logging
from typing import Optional
from uuid import UUID

from agency_iam.app.errors import (
    NO_CONTEXT,
    LinkageConflict,
    conflict,
    denied,
    guard_datastore,
    validation_error,
)
from agency_iam.app.services import (
    LINKAGE_FIELDS,
    AuditRecorder,
    ContextResolver,
    UnitOfWork,
    snapshot,
)
from agency_iam.domain.entities import Linkage, LinkageStatus
from agency_iam.libs.result import Result, Return

from .dtos import LinkageResponse, LinkageResult

logger = logging.getLogger(__name__)

# Reuse reasons recorded in audit metadata
ACTIVE_MATCH = "active_match"
CONCURRENT_CREATE = "concurrent_create"


class FindOrCreateLinkageUseCase:
    """
    Use case for idempotent linkage creation.

    Business Rules:
    - Descriptor is trimmed and must not be empty
    - Caller context must resolve to a tenant
    - An active linkage with the same key is reused (reused=True)
    - Completed/cancelled linkages never block a fresh one
    - Creators of the same key are serialized; a creator that still loses
      the race to the unique index re-reads once and reuses the winner
    - Every outcome is audited ("create" or "reuse")
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self,
        identity: str,
        subject_id: UUID,
        target_id: UUID,
        descriptor: str,
        consumer: Optional[str] = None,
    ) -> Result[LinkageResult]:
        """
        Execute find-or-create.

        Args:
            identity: Caller identity from the identity provider
            subject_id: Subject of the linkage (e.g. student)
            target_id: Target of the linkage (e.g. college branch)
            descriptor: Qualifier of the linkage (e.g. program name)
            consumer: Name of the calling flow, recorded on the audit trail

        Returns:
            Result with LinkageResult, or Error
        """
        descriptor = (descriptor or "").strip()
        if not descriptor:
            return Return.err(validation_error("Descriptor must not be empty"))

        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            await self.uow.linkages.lock_key(context, subject_id, target_id, descriptor)
            existing = await self.uow.linkages.find_active(
                context, subject_id, target_id, descriptor
            )

            reason = ACTIVE_MATCH
            if existing is None:
                linkage = Linkage(
                    tenant_id=context.tenant_id,
                    subject_id=subject_id,
                    target_id=target_id,
                    descriptor=descriptor,
                    status=LinkageStatus.active,
                )
                try:
                    linkage = await self.uow.linkages.create(context, linkage)
                except LinkageConflict:
                    await self.uow.rollback()
                    existing = await self.uow.linkages.find_active(
                        context, subject_id, target_id, descriptor
                    )
                    if existing is None:
                        logger.warning(
                            f"Linkage conflict without an active row: subject={subject_id} "
                            f"target={target_id} descriptor={descriptor!r}"
                        )
                        return Return.err(
                            conflict("Linkage was modified concurrently, retry")
                        )
                    reason = CONCURRENT_CREATE
                else:
                    await self.uow.commit()
                    response = LinkageResponse.from_entity(linkage)
                    await self.audit.record(
                        actor_id=context.identity,
                        tenant_id=context.tenant_id,
                        entity_type="linkage",
                        entity_id=linkage.id,
                        action="create",
                        new_values=snapshot(linkage, LINKAGE_FIELDS),
                        metadata={"consumer": consumer} if consumer else None,
                    )
                    return Return.ok(LinkageResult(linkage=response, reused=False))

            response = LinkageResponse.from_entity(existing)
            reused_id = existing.id

        await self.audit.record(
            actor_id=context.identity,
            tenant_id=context.tenant_id,
            entity_type="linkage",
            entity_id=reused_id,
            action="reuse",
            metadata={"consumer": consumer, "reason": reason},
        )
        return Return.ok(LinkageResult(linkage=response, reused=True))
