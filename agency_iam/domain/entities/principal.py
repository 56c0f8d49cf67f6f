"""
Principal Entity

An authenticated actor bound to exactly one tenant.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from .enums import PrincipalRole, PrincipalStatus

if TYPE_CHECKING:
    from .tenant import Tenant


class Principal(SQLModel, table=True):
    """
    Principal entity - a user of one agency.

    Business Rules:
    - id is the identity issued by the identity provider
    - tenant_id is set at provisioning and never changes
    - role and status change only by a tenant_admin of the same tenant,
      never on self
    - Only active principals resolve to a tenant context
    - A principal can always read its own record
    """

    __tablename__ = "principals"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: UUID = Field(
        foreign_key="tenants.id", nullable=False, index=True, ondelete="CASCADE"
    )

    email: str = Field(unique=True, index=True, max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)

    role: PrincipalRole = Field(nullable=False)
    status: PrincipalStatus = Field(default=PrincipalStatus.active)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    tenant: "Tenant" = Relationship(back_populates="principals")

    __table_args__ = (Index("idx_principal_tenant_status", "tenant_id", "status"),)
