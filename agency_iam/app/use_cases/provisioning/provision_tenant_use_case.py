"""
Provision Tenant Use Case

Creates a new agency tenant on the privileged path.
"""

from agency_iam.app.errors import guard_datastore
from agency_iam.app.services import (
    TENANT_FIELDS,
    AuditRecorder,
    UnitOfWork,
    snapshot,
)
from agency_iam.app.use_cases.tenants.dtos import TenantResponse
from agency_iam.domain.entities import Tenant
from agency_iam.libs.result import Result, Return

from .dtos import ProvisionTenantCommand


class ProvisionTenantUseCase:
    """
    Use case for creating a tenant.

    Business Rules:
    - Only reachable through the provisioning unit of work
    - Audited as "tenant_provisioned" with no actor
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(self, command: ProvisionTenantCommand) -> Result[TenantResponse]:
        async with self.uow:
            tenant = Tenant(
                name=command.name,
                contact_email=command.contact_email,
                contact_phone=command.contact_phone,
                currency=command.currency,
                timezone=command.timezone,
            )
            tenant = await self.uow.tenants.create(tenant)
            await self.uow.commit()

            response = TenantResponse.from_entity(tenant)
            await self.audit.record(
                actor_id=None,
                tenant_id=tenant.id,
                entity_type="tenant",
                entity_id=tenant.id,
                action="tenant_provisioned",
                new_values=snapshot(tenant, TENANT_FIELDS),
            )
            return Return.ok(response)
