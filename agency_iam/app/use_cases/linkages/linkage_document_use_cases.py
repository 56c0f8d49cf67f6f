"""
Linkage Document Use Cases

Attach a stored document (e.g. an offer letter) to a linkage and read its
locator back. Upload and storage happen elsewhere; only the opaque
locator and the original filename are kept here.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from agency_iam.app.errors import NO_CONTEXT, denied, guard_datastore, validation_error
from agency_iam.app.services import AuditRecorder, ContextResolver, UnitOfWork
from agency_iam.libs.result import Error, Result, Return

from .dtos import LinkageDocumentResponse, LinkageResponse


class AttachLinkageDocumentUseCase:
    """
    Use case for attaching a document locator to a linkage.

    Business Rules:
    - Linkage must be readable by the caller (same tenant)
    - Replaces any previously attached document
    - Audited as "update" with old/new locator
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self,
        identity: str,
        linkage_id: UUID,
        document_ref: str,
        document_name: Optional[str] = None,
    ) -> Result[LinkageResponse]:
        document_ref = (document_ref or "").strip()
        if not document_ref:
            return Return.err(validation_error("Document reference must not be empty"))

        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            linkage = await self.uow.linkages.get_by_id(context, linkage_id)
            if linkage is None:
                return Return.err(denied())

            old_values = {
                "document_ref": linkage.document_ref,
                "document_name": linkage.document_name,
            }
            linkage.document_ref = document_ref
            linkage.document_name = document_name
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
                old_values=old_values,
                new_values={"document_ref": document_ref, "document_name": document_name},
            )
            return Return.ok(response)


class GetLinkageDocumentUseCase:
    """Return the document locator of a linkage, gated by the linkage read rule"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(
        self, identity: str, linkage_id: UUID
    ) -> Result[LinkageDocumentResponse]:
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            linkage = await self.uow.linkages.get_by_id(context, linkage_id)
            if linkage is None:
                return Return.err(denied())

            if linkage.document_ref is None:
                return Return.err(
                    Error("DOCUMENT_NOT_FOUND", "No document attached to this linkage")
                )

            return Return.ok(
                LinkageDocumentResponse(
                    linkage_id=str(linkage.id),
                    document_ref=linkage.document_ref,
                    document_name=linkage.document_name,
                )
            )
