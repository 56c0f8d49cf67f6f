"""
Policy Predicates

Composable rules deciding whether a caller may touch a row. Every
predicate has two renderings:

- ``clause(entity, context)`` compiles it to a SQL filter, so reads are
  narrowed by the datastore itself
- ``matches(context, row, previous)`` evaluates it against an in-memory
  row (its new state) and the previous snapshot of changed fields, which
  is how writes are checked at flush time

Predicates combine with ``&`` (all must hold), ``|`` (any may hold)
and ``~`` (negation).
"""

from typing import Any, Mapping, Optional

from sqlalchemy import and_, false, not_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities.enums import PrincipalRole

Snapshot = Optional[Mapping[str, Any]]


class Predicate:
    """Base class for all policy predicates"""

    def clause(self, entity: type, context: CallerContext) -> ColumnElement:
        raise NotImplementedError

    def matches(self, context: CallerContext, row: Any, previous: Snapshot = None) -> bool:
        raise NotImplementedError

    def __and__(self, other: "Predicate") -> "Predicate":
        return AllOf(self, other)

    def __or__(self, other: "Predicate") -> "Predicate":
        return AnyOf(self, other)

    def __invert__(self) -> "Predicate":
        return Not(self)


class Always(Predicate):
    def clause(self, entity, context):
        return true()

    def matches(self, context, row, previous=None):
        return True

    def __repr__(self) -> str:
        return "Always()"


class Never(Predicate):
    def clause(self, entity, context):
        return false()

    def matches(self, context, row, previous=None):
        return False

    def __repr__(self) -> str:
        return "Never()"


class _ColumnEquals(Predicate):
    """Row column must equal a value taken from the caller context"""

    def __init__(self, column: str):
        self.column = column

    def _expected(self, context: CallerContext):
        raise NotImplementedError

    def clause(self, entity, context):
        expected = self._expected(context)
        if expected is None:
            return false()
        return getattr(entity, self.column) == expected

    def matches(self, context, row, previous=None):
        expected = self._expected(context)
        if expected is None:
            return False
        if getattr(row, self.column) != expected:
            return False
        # An update must also start from a matching row
        if previous is not None and self.column in previous:
            return previous[self.column] == expected
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.column!r})"


class TenantMatch(_ColumnEquals):
    """Row belongs to the caller's resolved tenant"""

    def __init__(self, column: str = "tenant_id"):
        super().__init__(column)

    def _expected(self, context):
        return context.tenant_id


class SelfMatch(_ColumnEquals):
    """Row is the caller's own principal record"""

    def __init__(self, column: str = "id"):
        super().__init__(column)

    def _expected(self, context):
        return context.identity


class CallerRole(Predicate):
    """Caller holds the given role in a resolved context"""

    def __init__(self, role: PrincipalRole):
        self.role = PrincipalRole(role)

    def _holds(self, context: CallerContext) -> bool:
        return context.is_resolved and context.role == self.role

    def clause(self, entity, context):
        return true() if self._holds(context) else false()

    def matches(self, context, row, previous=None):
        return self._holds(context)

    def __repr__(self) -> str:
        return f"CallerRole({self.role.value!r})"


class Unchanged(Predicate):
    """
    Field keeps its previous value.

    Only meaningful on writes; as a read filter it is always true.
    """

    def __init__(self, field: str):
        self.field = field

    def clause(self, entity, context):
        return true()

    def matches(self, context, row, previous=None):
        if previous is None or self.field not in previous:
            return True
        return previous[self.field] == getattr(row, self.field)

    def __repr__(self) -> str:
        return f"Unchanged({self.field!r})"


class AllOf(Predicate):
    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def clause(self, entity, context):
        return and_(*(p.clause(entity, context) for p in self.predicates))

    def matches(self, context, row, previous=None):
        return all(p.matches(context, row, previous) for p in self.predicates)

    def __repr__(self) -> str:
        return "(" + " & ".join(repr(p) for p in self.predicates) + ")"


class AnyOf(Predicate):
    def __init__(self, *predicates: Predicate):
        self.predicates = predicates

    def clause(self, entity, context):
        return or_(*(p.clause(entity, context) for p in self.predicates))

    def matches(self, context, row, previous=None):
        return any(p.matches(context, row, previous) for p in self.predicates)

    def __repr__(self) -> str:
        return "(" + " | ".join(repr(p) for p in self.predicates) + ")"


class Not(Predicate):
    def __init__(self, predicate: Predicate):
        self.predicate = predicate

    def clause(self, entity, context):
        return not_(self.predicate.clause(entity, context))

    def matches(self, context, row, previous=None):
        return not self.predicate.matches(context, row, previous)

    def __repr__(self) -> str:
        return f"~{self.predicate!r}"
