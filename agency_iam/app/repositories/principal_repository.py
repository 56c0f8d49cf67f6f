from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Principal, PrincipalStatus


class IPrincipalRepository(ABC):
    """Principal repository interface - application layer"""

    @abstractmethod
    async def get_by_id(
        self, context: CallerContext, principal_id: UUID
    ) -> Optional[Principal]:
        """Get principal by ID within the caller's scope"""
        pass

    @abstractmethod
    async def list_by_tenant(
        self, context: CallerContext, status: Optional[PrincipalStatus] = None
    ) -> List[Principal]:
        """List principals visible to the caller"""
        pass

    @abstractmethod
    async def update(self, context: CallerContext, principal: Principal) -> Principal:
        """
        Update existing principal.

        Raises:
            EmailTaken: the new email belongs to another principal
        """
        pass

    @abstractmethod
    async def delete(self, context: CallerContext, principal: Principal) -> None:
        """Delete principal"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Principal]:
        """Get principal by email (provisioning path)"""
        pass

    @abstractmethod
    async def create(self, principal: Principal) -> Principal:
        """
        Create a new principal (provisioning path).

        Raises:
            EmailTaken: the email belongs to another principal
        """
        pass
