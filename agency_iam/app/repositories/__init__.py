from .audit_record_repository import IAuditRecordRepository
from .linkage_repository import ILinkageRepository
from .principal_repository import IPrincipalRepository
from .tenant_repository import ITenantRepository

__all__ = [
    "IAuditRecordRepository",
    "ILinkageRepository",
    "IPrincipalRepository",
    "ITenantRepository",
]
