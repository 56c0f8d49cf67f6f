"""
Policy Enforcement Layer

Predicates and rules that scope every read and write on tenant-scoped
entities to the caller's context.
"""

from typing import Any, Optional

from sqlalchemy.sql import Select

from agency_iam.app.errors import FORBIDDEN, NO_CONTEXT, PolicyViolation
from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Operation

from .predicates import (
    AllOf,
    Always,
    AnyOf,
    CallerRole,
    Never,
    Not,
    Predicate,
    SelfMatch,
    Snapshot,
    TenantMatch,
    Unchanged,
)
from .rules import (
    APPEND_ONLY_ENTITIES,
    ENTITY_NAMES,
    POLICIES,
    PROTECTED_ENTITIES,
    rule_for,
)


def scope(stmt: Select, entity: type, context: CallerContext) -> Select:
    """Narrow a SELECT on ``entity`` to the rows the caller may read"""
    return stmt.where(rule_for(entity, Operation.read).clause(entity, context))


def denial_reason(context: Optional[CallerContext]) -> str:
    if context is None or not context.is_resolved:
        return NO_CONTEXT
    return FORBIDDEN


def check_write(
    row: Any,
    operation: Operation,
    context: Optional[CallerContext],
    previous: Snapshot = None,
) -> None:
    """
    Evaluate the write rule for ``row``.

    Raises:
        PolicyViolation: the rule does not hold for this caller
    """
    entity = type(row)
    name = ENTITY_NAMES.get(entity, entity.__name__)
    if context is None:
        raise PolicyViolation(NO_CONTEXT, name)
    if not rule_for(entity, operation).matches(context, row, previous):
        raise PolicyViolation(denial_reason(context), name)


__all__ = [
    "AllOf",
    "Always",
    "AnyOf",
    "CallerRole",
    "Never",
    "Not",
    "Predicate",
    "SelfMatch",
    "TenantMatch",
    "Unchanged",
    "APPEND_ONLY_ENTITIES",
    "ENTITY_NAMES",
    "POLICIES",
    "PROTECTED_ENTITIES",
    "rule_for",
    "scope",
    "check_write",
    "denial_reason",
]
