"""
Audit Use Cases

Read side of the audit trail.
"""

from .get_audit_records_use_case import (
    AuditRecordResponse,
    AuditRecordsResponse,
    GetAuditRecordsUseCase,
)

__all__ = [
    "GetAuditRecordsUseCase",
    "AuditRecordResponse",
    "AuditRecordsResponse",
]
