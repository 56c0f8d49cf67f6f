from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select

from agency_iam.app.policy import scope
from agency_iam.app.repositories.tenant_repository import ITenantRepository
from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Linkage, Principal, Tenant

from .base import SqlModelRepository


class TenantRepository(SqlModelRepository, ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    async def get(self, context: CallerContext, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID within the caller's scope"""
        stmt = scope(select(Tenant).where(Tenant.id == tenant_id), Tenant, context)
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID (provisioning path)"""
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        return await self._save(tenant)

    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        return await self._save(tenant)

    async def purge(self, tenant_id: UUID) -> Dict[str, int]:
        """Delete a tenant with its linkages and principals; audit records stay"""
        linkages = await self._execute(
            delete(Linkage).where(Linkage.tenant_id == tenant_id)
        )
        principals = await self._execute(
            delete(Principal).where(Principal.tenant_id == tenant_id)
        )
        tenants = await self._execute(delete(Tenant).where(Tenant.id == tenant_id))
        return {
            "linkages": linkages.rowcount,
            "principals": principals.rowcount,
            "tenants": tenants.rowcount,
        }
