"""
Data-layer policy enforcement.

Every AsyncSession the service opens runs on ``PolicySession``. Two
session events apply the policy rules regardless of how a query was
built:

- ``do_orm_execute`` adds the read rule of every protected entity to each
  ORM SELECT (relationship and refresh loads included) and refuses bulk
  INSERT/UPDATE/DELETE, textual SQL and table-level reads that reach a
  protected table without going through its mapped entity
- ``before_flush`` checks every new, modified and deleted protected row
  against its create/update/delete rule

A session without a bound context sees no protected rows and writes none.
Sessions marked privileged (provisioning and audit writes) skip the tenant
rules; audit records stay append-only for everyone.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import Table, TextClause, event, inspect
from sqlalchemy.orm import ORMExecuteState, with_loader_criteria
from sqlalchemy.sql.util import find_tables
from sqlmodel import Session

from agency_iam.app.errors import PolicyViolation
from agency_iam.app.policy import (
    APPEND_ONLY_ENTITIES,
    ENTITY_NAMES,
    PROTECTED_ENTITIES,
    check_write,
    rule_for,
)
from agency_iam.domain.context import CallerContext
from agency_iam.domain.entities import Operation

logger = logging.getLogger(__name__)

CONTEXT_KEY = "caller_context"
PRIVILEGED_KEY = "privileged"


class PolicySession(Session):
    """Sync session class behind every AsyncSession opened by the service"""


def bind_context(session: Any, context: CallerContext) -> None:
    """Attach the caller context to a (sync or async) session"""
    session.info[CONTEXT_KEY] = context


def clear_context(session: Any) -> None:
    session.info.pop(CONTEXT_KEY, None)


def mark_privileged(session: Any) -> None:
    session.info[PRIVILEGED_KEY] = True


def bound_context(session: Any) -> Optional[CallerContext]:
    return session.info.get(CONTEXT_KEY)


def is_privileged(session: Any) -> bool:
    return bool(session.info.get(PRIVILEGED_KEY, False))


def _protected_tables(statement: Any) -> Dict[str, type]:
    """Protected entities whose tables a statement reads or writes, by table name"""
    names = {
        table.name
        for table in find_tables(
            statement, include_aliases=True, include_joins=True, include_crud=True
        )
        if isinstance(table, Table)
    }
    return {
        entity.__table__.name: entity
        for entity in PROTECTED_ENTITIES
        if entity.__table__.name in names
    }


@event.listens_for(PolicySession, "do_orm_execute")
def _scope_orm_statements(orm_execute_state: ORMExecuteState) -> None:
    session = orm_execute_state.session
    if is_privileged(session):
        return

    statement = orm_execute_state.statement
    if isinstance(statement, TextClause):
        logger.warning("Refused textual SQL outside provisioning path")
        raise PolicyViolation("raw_sql_forbidden")

    touched = _protected_tables(statement)

    if orm_execute_state.is_select:
        # Only tables reached through a mapped entity get the loader criteria
        mapped = {mapper.local_table.name for mapper in orm_execute_state.all_mappers}
        unscoped = sorted(set(touched) - mapped)
        if unscoped:
            name = ENTITY_NAMES[touched[unscoped[0]]]
            logger.warning(f"Refused table-level read of {name} outside provisioning path")
            raise PolicyViolation("unscoped_read_forbidden", name)

        # Fail closed: no context means an anonymous caller that matches nothing
        context = bound_context(session) or CallerContext.anonymous()
        orm_execute_state.statement = statement.options(
            *(
                with_loader_criteria(
                    entity, rule_for(entity, Operation.read).clause(entity, context)
                )
                for entity in PROTECTED_ENTITIES
            )
        )
    elif touched:
        # Bulk INSERT/UPDATE/DELETE, ORM or Core, never passes the flush checks
        name = ENTITY_NAMES[next(iter(touched.values()))]
        logger.warning(f"Refused bulk write on {name} outside provisioning path")
        raise PolicyViolation("bulk_write_forbidden", name)


def _previous_values(instance: Any) -> Dict[str, Any]:
    """Original values of the columns changed on a dirty instance"""
    state = inspect(instance)
    previous = {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if history.has_changes() and history.deleted:
            previous[attr.key] = history.deleted[0]
    return previous


@event.listens_for(PolicySession, "before_flush")
def _check_flushed_writes(session: Session, flush_context: Any, instances: Any) -> None:
    privileged = is_privileged(session)
    context = bound_context(session)

    for instance in session.dirty:
        if isinstance(instance, APPEND_ONLY_ENTITIES) and session.is_modified(instance):
            raise PolicyViolation("append_only", ENTITY_NAMES[type(instance)])
    for instance in session.deleted:
        if isinstance(instance, APPEND_ONLY_ENTITIES):
            raise PolicyViolation("append_only", ENTITY_NAMES[type(instance)])

    if privileged:
        return

    for instance in session.new:
        if isinstance(instance, PROTECTED_ENTITIES):
            check_write(instance, Operation.create, context)

    for instance in session.dirty:
        if isinstance(instance, PROTECTED_ENTITIES) and session.is_modified(instance):
            check_write(
                instance, Operation.update, context, previous=_previous_values(instance)
            )

    for instance in session.deleted:
        if isinstance(instance, PROTECTED_ENTITIES):
            check_write(instance, Operation.delete, context)
