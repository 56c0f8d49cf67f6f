from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from agency_iam.app.errors import EmailTaken
from agency_iam.app.policy import check_write, scope
from agency_iam.app.repositories.principal_repository import IPrincipalRepository
from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Operation, Principal, PrincipalStatus

from .base import SqlModelRepository


class PrincipalRepository(SqlModelRepository, IPrincipalRepository):
    """Principal repository implementation using SQLModel"""

    async def get_by_id(
        self, context: CallerContext, principal_id: UUID
    ) -> Optional[Principal]:
        """Get principal by ID within the caller's scope"""
        stmt = scope(
            select(Principal).where(Principal.id == principal_id), Principal, context
        )
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_tenant(
        self, context: CallerContext, status: Optional[PrincipalStatus] = None
    ) -> List[Principal]:
        """List principals visible to the caller"""
        stmt = scope(select(Principal), Principal, context)
        if status is not None:
            stmt = stmt.where(Principal.status == status)
        stmt = stmt.order_by(Principal.created_at)
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def update(self, context: CallerContext, principal: Principal) -> Principal:
        """Update existing principal, raising EmailTaken on a duplicate email"""
        email = principal.email
        try:
            return await self._save(principal)
        except IntegrityError as exc:
            raise EmailTaken(email) from exc

    async def delete(self, context: CallerContext, principal: Principal) -> None:
        """Delete principal"""
        check_write(principal, Operation.delete, context)
        await self.session.delete(principal)
        await self._flush()

    async def get_by_email(self, email: str) -> Optional[Principal]:
        """Get principal by email (provisioning path)"""
        stmt = select(Principal).where(Principal.email == email)
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, principal: Principal) -> Principal:
        """Create a new principal, raising EmailTaken on a duplicate email"""
        email = principal.email
        try:
            return await self._save(principal)
        except IntegrityError as exc:
            raise EmailTaken(email) from exc
