"""
Agency IAM Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    LinkageStatus,
    Operation,
    PrincipalRole,
    PrincipalStatus,
)

# Export all entities
from .tenant import Tenant
from .principal import Principal
from .linkage import Linkage
from .audit_record import AuditRecord

__all__ = [
    # Enums
    "PrincipalRole",
    "PrincipalStatus",
    "LinkageStatus",
    "Operation",
    # Entities
    "Tenant",
    "Principal",
    "Linkage",
    "AuditRecord",
]
