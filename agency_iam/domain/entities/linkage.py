"""
Linkage Entity

Tenant-scoped link between a subject and a target, e.g. a student
enrolled at a college branch for a named program.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import LinkageStatus


class Linkage(SQLModel, table=True):
    """
    Linkage entity - duplicate-protected relationship record.

    Business Rules:
    - (subject_id, target_id, descriptor) is unique among active rows of a tenant
    - Completed/cancelled rows never block a fresh active row for the same key
    - Status moves only active -> completed or active -> cancelled
    - Never physically deleted
    - document_ref is an opaque storage locator, read under the same tenant rule
    """

    __tablename__ = "linkages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: UUID = Field(
        foreign_key="tenants.id", nullable=False, index=True, ondelete="CASCADE"
    )

    subject_id: UUID = Field(nullable=False)
    target_id: UUID = Field(nullable=False)
    descriptor: str = Field(max_length=255, nullable=False)

    status: LinkageStatus = Field(default=LinkageStatus.active)

    # Attached document (upload mechanics live elsewhere)
    document_ref: Optional[str] = Field(default=None, max_length=1024)
    document_name: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index(
            "idx_linkage_key_status", "subject_id", "target_id", "descriptor", "status"
        ),
        Index(
            "uq_linkage_active_key",
            "tenant_id",
            "subject_id",
            "target_id",
            "descriptor",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        Index("idx_linkage_tenant_subject", "tenant_id", "subject_id"),
    )
