"""
Provisioning Use Case DTOs (Data Transfer Objects)

Commands accepted on the privileged provisioning path and their responses.
"""

from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from agency_iam.domain.entities import PrincipalRole


# ============================================================================
# Command DTOs
# ============================================================================


class ProvisionTenantCommand(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    currency: str = Field(default="AUD", pattern=r"^[A-Z]{3}$")
    timezone: str = Field(default="Australia/Brisbane", min_length=1, max_length=64)


class TenantSettingsPatch(BaseModel):
    """Partial update of tenant settings; unset fields are left alone"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    currency: Optional[str] = Field(default=None, pattern=r"^[A-Z]{3}$")
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=64)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ProvisionPrincipalCommand(BaseModel):
    # Identity issued by the identity provider; generated when omitted
    id: Optional[UUID] = None
    email: EmailStr
    full_name: Optional[str] = Field(default=None, max_length=255)
    role: PrincipalRole = PrincipalRole.tenant_member


# ============================================================================
# Response DTOs
# ============================================================================


class PurgeTenantResponse(BaseModel):
    """Response for purge tenant use case"""

    status: str
    tenant_id: str
    purged: Dict[str, int]
