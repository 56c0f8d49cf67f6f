from abc import ABC, abstractmethod
from typing import Callable, Optional

from agency_iam.app.repositories import (
    IAuditRecordRepository,
    ILinkageRepository,
    IPrincipalRepository,
    ITenantRepository,
)
from agency_iam.domain.context import CallerContext


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository
    principals: IPrincipalRepository
    linkages: ILinkageRepository
    audit_records: IAuditRecordRepository

    # Context bound for the lifetime of one unit of work, never reused
    context: Optional[CallerContext] = None

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    def bind(self, context: CallerContext) -> None:
        """Attach the caller context to this unit of work's session"""
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


# Builds a fresh unit of work per call; each one owns its own session
UnitOfWorkFactory = Callable[[], UnitOfWork]
