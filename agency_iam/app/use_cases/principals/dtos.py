"""
Principal Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the principal domain.
"""

from typing import List, Optional

from pydantic import BaseModel, EmailStr

from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Principal, PrincipalRole, PrincipalStatus, Tenant


# ============================================================================
# Command DTOs
# ============================================================================


class PrincipalPatch(BaseModel):
    """Partial update of a principal; unset fields are left alone"""

    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[PrincipalRole] = None
    status: Optional[PrincipalStatus] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# ============================================================================
# Response DTOs
# ============================================================================


class PrincipalResponse(BaseModel):
    id: str
    tenant_id: str
    email: str
    full_name: Optional[str] = None
    role: str
    status: str
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, principal: Principal) -> "PrincipalResponse":
        return cls(
            id=str(principal.id),
            tenant_id=str(principal.tenant_id),
            email=principal.email,
            full_name=principal.full_name,
            role=principal.role.value,
            status=principal.status.value,
            created_at=principal.created_at.isoformat(),
            updated_at=principal.updated_at.isoformat(),
        )


class PrincipalListResponse(BaseModel):
    principals: List[PrincipalResponse]


class TenantSummary(BaseModel):
    """Tenant information in the /me response"""

    id: str
    name: str
    currency: str
    timezone: str

    @classmethod
    def from_entity(cls, tenant: Tenant) -> "TenantSummary":
        return cls(
            id=str(tenant.id),
            name=tenant.name,
            currency=tenant.currency,
            timezone=tenant.timezone,
        )


class ContextInfo(BaseModel):
    """Resolved caller context in the /me response"""

    resolved: bool
    tenant_id: Optional[str] = None
    role: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def from_context(cls, context: CallerContext) -> "ContextInfo":
        return cls(
            resolved=context.is_resolved,
            tenant_id=str(context.tenant_id) if context.tenant_id else None,
            role=context.role.value if context.role else None,
            reason=context.unresolved_reason,
        )


class MeResponse(BaseModel):
    """GET /me payload"""

    principal: PrincipalResponse
    tenant: Optional[TenantSummary] = None
    context: ContextInfo
