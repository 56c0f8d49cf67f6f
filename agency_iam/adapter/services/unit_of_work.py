from typing import Callable

from sqlmodel.ext.asyncio.session import AsyncSession

from agency_iam.adapter.policy import bind_context, clear_context, mark_privileged
from agency_iam.adapter.repositories import (
    AuditRecordRepository,
    LinkageRepository,
    PrincipalRepository,
    TenantRepository,
)
from agency_iam.adapter.repositories.base import TRANSIENT_ERRORS
from agency_iam.app.errors import DatastoreUnavailable
from agency_iam.app.services.unit_of_work import UnitOfWork, UnitOfWorkFactory
from agency_iam.domain.context import CallerContext

SessionFactory = Callable[[], AsyncSession]


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    SQLAlchemy implementation of UnitOfWork pattern.

    Each ``async with`` opens a fresh session from the factory and closes it
    on exit, so a caller context never outlives the unit of work it was
    bound to.
    """

    privileged = False

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory
        self.session = None
        self.context = None

    async def __aenter__(self):
        self.session = self.session_factory()
        if self.privileged:
            mark_privileged(self.session)

        # Initialize all repositories with the session
        self.tenants = TenantRepository(self.session)
        self.principals = PrincipalRepository(self.session)
        self.linkages = LinkageRepository(self.session)
        self.audit_records = AuditRecordRepository(self.session)
        return self

    async def __aexit__(self, *args):
        try:
            await self.rollback()
        finally:
            clear_context(self.session)
            self.context = None
            await self.session.close()

    def bind(self, context: CallerContext) -> None:
        bind_context(self.session, context)
        self.context = context

    async def commit(self):
        try:
            await self.session.commit()
        except TRANSIENT_ERRORS as exc:
            raise DatastoreUnavailable(str(exc)) from exc

    async def rollback(self):
        try:
            await self.session.rollback()
        except TRANSIENT_ERRORS as exc:
            raise DatastoreUnavailable(str(exc)) from exc


class ProvisioningUnitOfWork(SqlAlchemyUnitOfWork):
    """
    Privileged unit of work for provisioning and audit writes.

    Its session skips the tenant rules; audit records stay append-only.
    Never handed to a principal-facing use case.
    """

    privileged = True


def unit_of_work_factory(session_factory: SessionFactory) -> UnitOfWorkFactory:
    return lambda: SqlAlchemyUnitOfWork(session_factory)


def provisioning_unit_of_work_factory(session_factory: SessionFactory) -> UnitOfWorkFactory:
    return lambda: ProvisioningUnitOfWork(session_factory)
