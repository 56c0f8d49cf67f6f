"""
Get Linkage Use Case
"""

from uuid import UUID

from agency_iam.app.errors import NO_CONTEXT, denied, guard_datastore
from agency_iam.app.services import ContextResolver, UnitOfWork
from agency_iam.libs.result import Result, Return

from .dtos import LinkageResponse


class GetLinkageUseCase:
    """Read one linkage of the caller's tenant"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @guard_datastore
    async def execute(self, identity: str, linkage_id: UUID) -> Result[LinkageResponse]:
        async with self.uow:
            context = await ContextResolver(self.uow).resolve(identity)
            if not context.is_resolved:
                return Return.err(denied(NO_CONTEXT))

            linkage = await self.uow.linkages.get_by_id(context, linkage_id)
            if linkage is None:
                return Return.err(denied())

            return Return.ok(LinkageResponse.from_entity(linkage))
