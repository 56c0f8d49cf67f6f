"""
Tenant Entity

Represents an agency: the root of data isolation.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

if TYPE_CHECKING:
    from .principal import Principal


class Tenant(SQLModel, table=True):
    """
    Tenant entity - an isolated agency workspace.

    Business Rules:
    - Every principal and linkage belongs to exactly one tenant
    - Created, updated and purged only through the provisioning path
    - Principals may read their own tenant, never write it
    - Purging a tenant removes its principals and linkages, audit records stay
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    contact_email: Optional[str] = Field(default=None, max_length=255)
    contact_phone: Optional[str] = Field(default=None, max_length=50)

    # Locale settings
    currency: str = Field(default="AUD", max_length=3)
    timezone: str = Field(default="Australia/Brisbane", max_length=64)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    # Relationships
    principals: list["Principal"] = Relationship(back_populates="tenant")

    __table_args__ = (Index("idx_tenant_name", "name"),)
