import hashlib
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from agency_iam.app.errors import DatastoreUnavailable, LinkageConflict
from agency_iam.app.policy import check_write, scope
from agency_iam.app.repositories.linkage_repository import ILinkageRepository
from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Linkage, LinkageStatus, Operation

from .base import TRANSIENT_ERRORS, SqlModelRepository

logger = logging.getLogger(__name__)


def linkage_lock_key(
    tenant_id: UUID, subject_id: UUID, target_id: UUID, descriptor: str
) -> int:
    """Stable signed 64-bit key for a linkage key, usable as an advisory lock id"""
    raw = f"{tenant_id}:{subject_id}:{target_id}:{descriptor}".encode("utf-8")
    return int.from_bytes(hashlib.sha256(raw).digest()[:8], "big", signed=True)


class LinkageRepository(SqlModelRepository, ILinkageRepository):
    """Linkage repository implementation using SQLModel"""

    async def get_by_id(
        self, context: CallerContext, linkage_id: UUID
    ) -> Optional[Linkage]:
        """Get linkage by ID within the caller's tenant"""
        stmt = scope(select(Linkage).where(Linkage.id == linkage_id), Linkage, context)
        result = await self._execute(stmt)
        return result.scalar_one_or_none()

    async def find_active(
        self, context: CallerContext, subject_id: UUID, target_id: UUID, descriptor: str
    ) -> Optional[Linkage]:
        """Get the active linkage for a (subject, target, descriptor) key"""
        stmt = scope(
            select(Linkage).where(
                Linkage.subject_id == subject_id,
                Linkage.target_id == target_id,
                Linkage.descriptor == descriptor,
                Linkage.status == LinkageStatus.active,
            ),
            Linkage,
            context,
        )
        result = await self._execute(stmt)
        return result.scalars().first()

    async def list_by_tenant(
        self,
        context: CallerContext,
        subject_id: Optional[UUID] = None,
        target_id: Optional[UUID] = None,
        status: Optional[LinkageStatus] = None,
    ) -> List[Linkage]:
        """List linkages in the caller's tenant, newest first"""
        stmt = scope(select(Linkage), Linkage, context)
        if subject_id is not None:
            stmt = stmt.where(Linkage.subject_id == subject_id)
        if target_id is not None:
            stmt = stmt.where(Linkage.target_id == target_id)
        if status is not None:
            stmt = stmt.where(Linkage.status == status)
        stmt = stmt.order_by(Linkage.created_at.desc())
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def lock_key(
        self, context: CallerContext, subject_id: UUID, target_id: UUID, descriptor: str
    ) -> None:
        """
        Take a transaction-scoped advisory lock on the linkage key.

        PostgreSQL only; sqlite already serializes writers, and the partial
        unique index backs up both.
        """
        if self.session.get_bind().dialect.name != "postgresql":
            return
        key = linkage_lock_key(context.tenant_id, subject_id, target_id, descriptor)
        await self._execute(select(func.pg_advisory_xact_lock(key)))

    async def create(self, context: CallerContext, linkage: Linkage) -> Linkage:
        """Create a new linkage, raising LinkageConflict if the key is taken"""
        check_write(linkage, Operation.create, context)
        key = (linkage.subject_id, linkage.target_id, linkage.descriptor)
        self.session.add(linkage)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            logger.info(
                f"Active linkage already exists for subject={key[0]} "
                f"target={key[1]} descriptor={key[2]!r}"
            )
            raise LinkageConflict(str(exc.orig)) from exc
        except TRANSIENT_ERRORS as exc:
            raise DatastoreUnavailable(str(exc)) from exc
        await self.session.refresh(linkage)
        return linkage

    async def update(self, context: CallerContext, linkage: Linkage) -> Linkage:
        """Update existing linkage"""
        return await self._save(linkage)
