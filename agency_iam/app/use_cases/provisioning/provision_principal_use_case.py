"""
Provision Principal Use Case

Registers a principal for an identity issued by the identity provider.
"""

from uuid import UUID

from agency_iam.app.errors import EmailTaken, conflict, guard_datastore
from agency_iam.app.services import (
    PRINCIPAL_FIELDS,
    AuditRecorder,
    UnitOfWork,
    snapshot,
)
from agency_iam.app.use_cases.principals.dtos import PrincipalResponse
from agency_iam.domain.entities import Principal, PrincipalStatus
from agency_iam.libs.result import Error, Result, Return

from .dtos import ProvisionPrincipalCommand


class ProvisionPrincipalUseCase:
    """
    Use case for creating a principal in a tenant.

    Business Rules:
    - Tenant must exist
    - Email is unique across all tenants
    - New principals start active
    - Audited as "principal_provisioned"
    """

    def __init__(self, uow: UnitOfWork, audit: AuditRecorder):
        self.uow = uow
        self.audit = audit

    @guard_datastore
    async def execute(
        self, tenant_id: UUID, command: ProvisionPrincipalCommand
    ) -> Result[PrincipalResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            existing = await self.uow.principals.get_by_email(command.email)
            if existing is not None:
                return Return.err(conflict("Email already in use"))

            principal = Principal(
                tenant_id=tenant_id,
                email=command.email,
                full_name=command.full_name,
                role=command.role,
                status=PrincipalStatus.active,
            )
            if command.id is not None:
                principal.id = command.id

            try:
                principal = await self.uow.principals.create(principal)
            except EmailTaken:
                await self.uow.rollback()
                return Return.err(conflict("Email already in use"))
            await self.uow.commit()

            response = PrincipalResponse.from_entity(principal)
            await self.audit.record(
                actor_id=None,
                tenant_id=tenant_id,
                entity_type="principal",
                entity_id=principal.id,
                action="principal_provisioned",
                new_values=snapshot(principal, PRINCIPAL_FIELDS),
            )
            return Return.ok(response)
