from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Linkage, LinkageStatus


class ILinkageRepository(ABC):
    """Linkage repository interface - application layer"""

    @abstractmethod
    async def get_by_id(
        self, context: CallerContext, linkage_id: UUID
    ) -> Optional[Linkage]:
        """Get linkage by ID within the caller's tenant"""
        pass

    @abstractmethod
    async def find_active(
        self, context: CallerContext, subject_id: UUID, target_id: UUID, descriptor: str
    ) -> Optional[Linkage]:
        """Get the active linkage for a (subject, target, descriptor) key"""
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        context: CallerContext,
        subject_id: Optional[UUID] = None,
        target_id: Optional[UUID] = None,
        status: Optional[LinkageStatus] = None,
    ) -> List[Linkage]:
        """List linkages in the caller's tenant, newest first"""
        pass

    @abstractmethod
    async def lock_key(
        self, context: CallerContext, subject_id: UUID, target_id: UUID, descriptor: str
    ) -> None:
        """Serialize creators of the same key until the transaction ends"""
        pass

    @abstractmethod
    async def create(self, context: CallerContext, linkage: Linkage) -> Linkage:
        """
        Create a new linkage.

        Raises:
            LinkageConflict: an active linkage with the same key already exists
        """
        pass

    @abstractmethod
    async def update(self, context: CallerContext, linkage: Linkage) -> Linkage:
        """Update existing linkage"""
        pass
