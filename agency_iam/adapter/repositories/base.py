import asyncio
from typing import Any

from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel.ext.asyncio.session import AsyncSession

from agency_iam.app.errors import DatastoreUnavailable

# Driver/pool failures that mean "try again later", never "policy said no"
TRANSIENT_ERRORS = (OperationalError, PoolTimeoutError, asyncio.TimeoutError)


class SqlModelRepository:
    """Shared session plumbing for SQLModel repositories"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _execute(self, stmt: Any):
        try:
            return await self.session.execute(stmt)
        except TRANSIENT_ERRORS as exc:
            raise DatastoreUnavailable(str(exc)) from exc

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except TRANSIENT_ERRORS as exc:
            raise DatastoreUnavailable(str(exc)) from exc

    async def _save(self, entity: Any) -> Any:
        self.session.add(entity)
        await self._flush()
        await self.session.refresh(entity)
        return entity
