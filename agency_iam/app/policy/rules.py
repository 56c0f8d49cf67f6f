"""
Policy Rules

The access rules for every tenant-scoped entity, one predicate per
(entity, operation). Anything not listed is denied.
"""

from typing import Dict, Tuple

from agency_iam.domain.entities import (
    AuditRecord,
    Linkage,
    Operation,
    Principal,
    PrincipalRole,
    Tenant,
)

from .predicates import (
    CallerRole,
    Never,
    Predicate,
    SelfMatch,
    TenantMatch,
    Unchanged,
)

_is_admin = CallerRole(PrincipalRole.tenant_admin)

# Own profile edits may not touch tenant, role or status
_self_profile_update = (
    SelfMatch() & Unchanged("tenant_id") & Unchanged("role") & Unchanged("status")
)

# Admins edit principals of their own tenant, but never their own role or status
_admin_update = (
    _is_admin
    & TenantMatch()
    & Unchanged("tenant_id")
    & ~(SelfMatch() & ~Unchanged("role"))
    & ~(SelfMatch() & ~Unchanged("status"))
)

POLICIES: Dict[Tuple[type, Operation], Predicate] = {
    # Tenants are provisioned and changed outside the tenant-scoped path
    (Tenant, Operation.read): TenantMatch("id"),
    (Tenant, Operation.create): Never(),
    (Tenant, Operation.update): Never(),
    (Tenant, Operation.delete): Never(),
    # Principals
    (Principal, Operation.read): TenantMatch() | SelfMatch(),
    (Principal, Operation.create): Never(),
    (Principal, Operation.update): _self_profile_update | _admin_update,
    (Principal, Operation.delete): _is_admin & TenantMatch() & ~SelfMatch(),
    # Linkages are status-transitioned, never deleted
    (Linkage, Operation.read): TenantMatch(),
    (Linkage, Operation.create): TenantMatch(),
    (Linkage, Operation.update): TenantMatch(),
    (Linkage, Operation.delete): Never(),
    # Audit records are written by the recorder on the provisioning path
    (AuditRecord, Operation.read): _is_admin & TenantMatch(),
    (AuditRecord, Operation.create): Never(),
    (AuditRecord, Operation.update): Never(),
    (AuditRecord, Operation.delete): Never(),
}

PROTECTED_ENTITIES: Tuple[type, ...] = (Tenant, Principal, Linkage, AuditRecord)

# Immutable even for privileged sessions
APPEND_ONLY_ENTITIES: Tuple[type, ...] = (AuditRecord,)

ENTITY_NAMES: Dict[type, str] = {
    Tenant: "tenant",
    Principal: "principal",
    Linkage: "linkage",
    AuditRecord: "audit_record",
}


def rule_for(entity: type, operation: Operation) -> Predicate:
    """Return the rule for an entity/operation, denying anything unlisted"""
    return POLICIES.get((entity, Operation(operation)), Never())
