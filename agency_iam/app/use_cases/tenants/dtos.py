"""
Tenant Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel

from agency_iam.domain.entities import Tenant


class TenantResponse(BaseModel):
    """A tenant with its settings"""

    id: str
    name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    currency: str
    timezone: str
    created_at: str
    updated_at: str

    @classmethod
    def from_entity(cls, tenant: Tenant) -> "TenantResponse":
        return cls(
            id=str(tenant.id),
            name=tenant.name,
            contact_email=tenant.contact_email,
            contact_phone=tenant.contact_phone,
            currency=tenant.currency,
            timezone=tenant.timezone,
            created_at=tenant.created_at.isoformat(),
            updated_at=tenant.updated_at.isoformat(),
        )
