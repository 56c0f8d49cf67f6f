from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import agency_iam.domain.entities  # noqa: F401  (registers tables)
from agency_iam.adapter.policy import PolicySession
from agency_iam.adapter.services import (
    ProvisioningUnitOfWork,
    SqlAlchemyUnitOfWork,
    provisioning_unit_of_work_factory,
    unit_of_work_factory,
)
from agency_iam.api.utils.jwt import generate_jwt
from agency_iam.app.services import AuditRecorder
from agency_iam.app.use_cases.provisioning import (
    ProvisionPrincipalCommand,
    ProvisionPrincipalUseCase,
    ProvisionTenantCommand,
    ProvisionTenantUseCase,
)
from agency_iam.depends import (
    get_audit_recorder,
    get_provisioning_unit_of_work,
    get_unit_of_work,
)
from agency_iam.domain.entities import PrincipalRole
from config import ApplicationConfig


@pytest_asyncio.fixture
async def engine(tmp_path):
    # File database: concurrent units of work need their own connections
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'agency_iam_test.db'}",
        connect_args={"timeout": 15},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        engine,
        class_=AsyncSession,
        sync_session_class=PolicySession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(engine):
    """Unscoped session for inspecting the database behind the service"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def uow_factory(session_factory):
    return unit_of_work_factory(session_factory)


@pytest.fixture
def provisioning_uow_factory(session_factory):
    return provisioning_unit_of_work_factory(session_factory)


@pytest.fixture
def audit_recorder(provisioning_uow_factory):
    return AuditRecorder(provisioning_uow_factory)


async def provision_tenant(provisioning_uow_factory, audit_recorder, name):
    result = await ProvisionTenantUseCase(provisioning_uow_factory(), audit_recorder).execute(
        ProvisionTenantCommand(name=name)
    )
    assert result.is_ok()
    return SimpleNamespace(id=UUID(result.value.id), name=result.value.name)


async def provision_principal(
    provisioning_uow_factory, audit_recorder, tenant_id, email, role
):
    result = await ProvisionPrincipalUseCase(
        provisioning_uow_factory(), audit_recorder
    ).execute(
        tenant_id,
        ProvisionPrincipalCommand(id=uuid4(), email=email, full_name=email, role=role),
    )
    assert result.is_ok()
    principal = result.value
    return SimpleNamespace(
        id=UUID(principal.id),
        identity=principal.id,
        tenant_id=UUID(principal.tenant_id),
        email=principal.email,
    )


@pytest_asyncio.fixture
async def world(provisioning_uow_factory, audit_recorder):
    """
    Two agencies:
    - tenant A with an admin and a member
    - tenant B with an admin
    Identities are principal ids as strings.
    """
    tenant_a = await provision_tenant(provisioning_uow_factory, audit_recorder, "Agency A")
    tenant_b = await provision_tenant(provisioning_uow_factory, audit_recorder, "Agency B")

    admin_a = await provision_principal(
        provisioning_uow_factory,
        audit_recorder,
        tenant_a.id,
        "admin@agency-a.com",
        PrincipalRole.tenant_admin,
    )
    member_a = await provision_principal(
        provisioning_uow_factory,
        audit_recorder,
        tenant_a.id,
        "member@agency-a.com",
        PrincipalRole.tenant_member,
    )
    admin_b = await provision_principal(
        provisioning_uow_factory,
        audit_recorder,
        tenant_b.id,
        "admin@agency-b.com",
        PrincipalRole.tenant_admin,
    )

    return SimpleNamespace(
        tenant_a=tenant_a,
        tenant_b=tenant_b,
        admin_a=admin_a,
        member_a=member_a,
        admin_b=admin_b,
    )


@pytest.fixture
def api_prefix():
    return ApplicationConfig.API_PREFIX


@pytest.fixture
def auth_headers():
    def headers(principal):
        return {"Authorization": f"Bearer {generate_jwt(principal.id)}"}

    return headers


@pytest_asyncio.fixture
async def client(session_factory, audit_recorder):
    from agency_iam.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        return SqlAlchemyUnitOfWork(session_factory)

    async def override_get_provisioning_unit_of_work():
        return ProvisioningUnitOfWork(session_factory)

    async def override_get_audit_recorder():
        return audit_recorder

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_provisioning_unit_of_work] = (
        override_get_provisioning_unit_of_work
    )
    app.dependency_overrides[get_audit_recorder] = override_get_audit_recorder

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
