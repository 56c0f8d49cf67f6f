"""
Caller Context

The resolved (tenant, role) pair used to scope one operation.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .entities.enums import PrincipalRole

UNKNOWN_PRINCIPAL = "unknown_principal"
INACTIVE_PRINCIPAL = "inactive_principal"
PENDING_RESOLUTION = "pending_resolution"


def parse_identity(identity: Optional[str]) -> Optional[UUID]:
    """Parse an identity string into a principal id, None when malformed"""
    if identity is None:
        return None
    if isinstance(identity, UUID):
        return identity
    try:
        return UUID(str(identity))
    except ValueError:
        return None


@dataclass(frozen=True)
class CallerContext:
    """
    Immutable caller context carried explicitly through one unit of work.

    A context is resolved when both tenant_id and role are known. An
    unresolved context still carries the caller identity so self-access
    rules can match, and records why resolution failed.
    """

    identity: Optional[UUID]
    tenant_id: Optional[UUID] = None
    role: Optional[PrincipalRole] = None
    unresolved_reason: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.tenant_id is not None and self.role is not None

    @property
    def is_admin(self) -> bool:
        return self.is_resolved and self.role == PrincipalRole.tenant_admin

    @classmethod
    def resolved(
        cls, identity: UUID, tenant_id: UUID, role: PrincipalRole
    ) -> "CallerContext":
        return cls(identity=identity, tenant_id=tenant_id, role=PrincipalRole(role))

    @classmethod
    def unresolved(cls, identity: Optional[UUID], reason: str) -> "CallerContext":
        return cls(identity=identity, unresolved_reason=reason)

    @classmethod
    def anonymous(cls) -> "CallerContext":
        return cls(identity=None, unresolved_reason=UNKNOWN_PRINCIPAL)
