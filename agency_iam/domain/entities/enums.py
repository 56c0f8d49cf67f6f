"""
Agency IAM Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class PrincipalRole(str, Enum):
    """Principal role within its tenant"""

    tenant_admin = "tenant_admin"
    tenant_member = "tenant_member"


class PrincipalStatus(str, Enum):
    """Principal account status"""

    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class LinkageStatus(str, Enum):
    """Linkage lifecycle status"""

    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class Operation(str, Enum):
    """Operation classes checked by the policy layer"""

    read = "read"
    create = "create"
    update = "update"
    delete = "delete"
