from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from agency_iam.adapter.policy import PolicySession
from agency_iam.adapter.services import (
    ProvisioningUnitOfWork,
    SqlAlchemyUnitOfWork,
    provisioning_unit_of_work_factory,
)
from agency_iam.api.utils.jwt import verify_jwt
from agency_iam.app.services import AuditRecorder, UnitOfWork


def connect_args(db_uri: str, timeout: float) -> dict:
    """Driver-level timeout so a stalled datastore surfaces as unavailable"""
    if db_uri.startswith("sqlite"):
        return {"timeout": timeout}
    if "+asyncpg" in db_uri:
        return {"command_timeout": timeout}
    return {}


engine = create_async_engine(
    ApplicationConfig.DB_URI,
    echo=False,
    future=True,
    connect_args=connect_args(
        ApplicationConfig.DB_URI, ApplicationConfig.DB_STATEMENT_TIMEOUT
    ),
)

AsyncSessionLocal = sessionmaker(
    engine,
    class_=AsyncSession,
    sync_session_class=PolicySession,
    expire_on_commit=False,
    autoflush=False,
)

security = HTTPBearer()


async def get_unit_of_work() -> UnitOfWork:
    return SqlAlchemyUnitOfWork(AsyncSessionLocal)


async def get_provisioning_unit_of_work() -> UnitOfWork:
    return ProvisioningUnitOfWork(AsyncSessionLocal)


async def get_audit_recorder() -> AuditRecorder:
    return AuditRecorder(provisioning_unit_of_work_factory(AsyncSessionLocal))


async def get_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    Dependency to extract the caller identity from the Authorization header.

    Only the subject claim is trusted; tenant and role are resolved per
    unit of work from the principal record.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Principal identity (the token subject)

    Raises:
        HTTPException: 401 if token is invalid, expired or has no subject
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    return payload["sub"]
