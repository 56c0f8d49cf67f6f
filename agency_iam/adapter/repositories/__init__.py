from .audit_record_repository import AuditRecordRepository
from .linkage_repository import LinkageRepository, linkage_lock_key
from .principal_repository import PrincipalRepository
from .tenant_repository import TenantRepository

__all__ = [
    "AuditRecordRepository",
    "LinkageRepository",
    "PrincipalRepository",
    "TenantRepository",
    "linkage_lock_key",
]
