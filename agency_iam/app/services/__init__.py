from .audit_recorder import (
    LINKAGE_FIELDS,
    PRINCIPAL_FIELDS,
    TENANT_FIELDS,
    AuditRecorder,
    json_safe,
    snapshot,
)
from .context_resolver import ContextResolver
from .unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AuditRecorder",
    "ContextResolver",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "LINKAGE_FIELDS",
    "PRINCIPAL_FIELDS",
    "TENANT_FIELDS",
    "json_safe",
    "snapshot",
]
