"""
AuditRecord Entity

Immutable log of every accepted mutation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class AuditRecord(SQLModel, table=True):
    """
    AuditRecord entity - append-only trail of accepted mutations.

    Business Rules:
    - Immutable (never updated or deleted, not even on the provisioning path)
    - tenant_id is not a foreign key so the trail outlives a purged tenant
    - actor_id is None for provisioning/system actions
    - old_values is None for creations, new_values is None for deletions
    """

    __tablename__ = "audit_records"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    actor_id: Optional[UUID] = Field(default=None, index=True)
    tenant_id: Optional[UUID] = Field(default=None, index=True)

    entity_type: str = Field(max_length=50)  # e.g., "linkage", "principal"
    entity_id: UUID = Field(nullable=False)
    action: str = Field(max_length=100)  # e.g., "create", "reuse"

    old_values: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    new_values: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_tenant_action", "tenant_id", "action"),
        Index("idx_audit_entity", "entity_type", "entity_id"),
    )
