"""
List Linkages Use Case
"""

from typing import Optional
from uuid import UUID

from agency_iam.app.errors import NO_CONTEXT, denied, guard_datastore, validation_error
from agency_iam.app.services import ContextResolver, UnitOfWork
from agency_iam.domain.entities import LinkageStatus
from agency_iam.libs.result import Result, Return

from .dtos import LinkageListResponse, LinkageResponse


class ListLinkagesUseCase:
    """
    Use case for listing the caller's tenant linkages.

    Business Rules:
    - Only linkages of the caller's tenant are returned
    - Optional filters: subject, target, status
    - Newest first
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(
        self,
        identity: str,
        subject_id: Optional[UUID] = None,
        target_id: Optional[UUID] = None,
        status: Optional[str] = None,
    ) -> Result[LinkageListResponse]:
        status_filter = None
        if status is not None:
            try:
                status_filter = LinkageStatus(status)
            except ValueError:
                return Return.err(validation_error(f"Invalid status: {status}"))

        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            linkages = await self.uow.linkages.list_by_tenant(
                context,
                subject_id=subject_id,
                target_id=target_id,
                status=status_filter,
            )
            return Return.ok(
                LinkageListResponse(
                    linkages=[LinkageResponse.from_entity(l) for l in linkages]
                )
            )
