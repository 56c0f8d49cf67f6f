from abc import ABC, abstractmethod
from typing import Dict, Optional
from uuid import UUID

from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get(self, context: CallerContext, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID within the caller's scope"""
        pass

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID (provisioning path)"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant (provisioning path)"""
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant (provisioning path)"""
        pass

    @abstractmethod
    async def purge(self, tenant_id: UUID) -> Dict[str, int]:
        """
        Delete a tenant and every row it owns (provisioning path).

        Returns:
            Counts of deleted rows keyed by relation name
        """
        pass
