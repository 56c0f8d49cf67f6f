"""
Use Case: Purge Tenant

Deletes a tenant with all of its principals and linkages. The audit
trail is retained.
"""

from uuid import UUID

from agency_iam.app.errors import guard_datastore
from agency_iam.app.services import TENANT_FIELDS, AuditRecorder, UnitOfWork, snapshot
from agency_iam.libs.result import Error, Result, Return

from .dtos import PurgeTenantResponse


class PurgeTenantUseCase:
    """
    Purge all tenant-scoped data.

    Business Logic:
    1. Validate tenant exists
    2. Delete all linkages of the tenant
    3. Delete all principals of the tenant
    4. Delete the tenant record
    5. Retain audit records (tenant_id is not a foreign key)
    6. Write a final "tenant_purged" audit record with the counts
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(self, tenant_id: UUID) -> Result[PurgeTenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            old_values = snapshot(tenant, TENANT_FIELDS)
            counts = await self.uow.tenants.purge(tenant_id)
            await self.uow.commit()

            await self.audit.record(
                actor_id=None,
                tenant_id=tenant_id,
                entity_type="tenant",
                entity_id=tenant_id,
                action="tenant_purged",
                old_values=old_values,
                metadata={"purged": counts},
            )
            return Return.ok(
                PurgeTenantResponse(
                    status="purged", tenant_id=str(tenant_id), purged=counts
                )
            )
