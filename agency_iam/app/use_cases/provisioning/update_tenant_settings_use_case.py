"""
Update Tenant Settings Use Case
"""

from datetime import datetime
from uuid import UUID

from agency_iam.app.errors import guard_datastore
from agency_iam.app.services import AuditRecorder, UnitOfWork
from agency_iam.app.use_cases.tenants.dtos import TenantResponse
from agency_iam.libs.result import Error, Result, Return

from .dtos import TenantSettingsPatch


class UpdateTenantSettingsUseCase:
    """
    Use case for changing tenant name, contact and locale settings.

    Business Rules:
    - Only reachable through the provisioning unit of work
    - Audited as "tenant_updated" with the changed fields only
    - A no-op patch writes no audit record
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self, tenant_id: UUID, patch: TenantSettingsPatch
    ) -> Result[TenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            changes = {
                field: value
                for field, value in patch.changes().items()
                if getattr(tenant, field) != value
            }
            if not changes:
                return Return.ok(TenantResponse.from_entity(tenant))

            previous = {field: getattr(tenant, field) for field in changes}
            for field, value in changes.items():
                setattr(tenant, field, value)
            tenant.updated_at = datetime.utcnow()

            tenant = await self.uow.tenants.update(tenant)
            await self.uow.commit()

            response = TenantResponse.from_entity(tenant)
            await self.audit.record(
                actor_id=None,
                tenant_id=tenant.id,
                entity_type="tenant",
                entity_id=tenant.id,
                action="tenant_updated",
                old_values=previous,
                new_values=changes,
            )
            return Return.ok(response)
