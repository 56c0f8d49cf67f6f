"""
Context Resolver

Turns a verified identity into the caller context for one unit of work.
"""

import logging
from typing import Optional

from agency_iam.app.services.unit_of_work import UnitOfWork
from agency_iam.domain.context import (
    INACTIVE_PRINCIPAL,
    PENDING_RESOLUTION,
    UNKNOWN_PRINCIPAL,
    CallerContext,
    parse_identity,
)
from agency_iam.domain.entities import PrincipalStatus

logger = logging.getLogger(__name__)


class ContextResolver:
    """
    Resolves the caller's tenant and role from its principal record.

    Business Rules:
    - Identity is trusted as-is (verified upstream by the identity provider)
    - Unknown identity -> unresolved (unknown_principal)
    - Principal not active -> unresolved (inactive_principal)
    - The principal lookup runs through the self-access read rule
    - The result is bound to the current unit of work only, never cached
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def resolve(self, identity: Optional[str]) -> CallerContext:
        """
        Resolve and bind the caller context.

        Must run inside ``async with uow`` so resolution and the operation
        that follows share one transaction.

        Args:
            identity: Principal identity supplied by the identity provider

        Returns:
            CallerContext, resolved or carrying the reason it is not
        """
        principal_id = parse_identity(identity)
        if principal_id is None:
            context = CallerContext.unresolved(None, UNKNOWN_PRINCIPAL)
            self.uow.bind(context)
            return context

        # A self-only context: the lookup can see the caller's own row and nothing else
        pending = CallerContext.unresolved(principal_id, PENDING_RESOLUTION)
        self.uow.bind(pending)
        principal = await self.uow.principals.get_by_id(pending, principal_id)

        if principal is None:
            context = CallerContext.unresolved(principal_id, UNKNOWN_PRINCIPAL)
        elif principal.status != PrincipalStatus.active:
            context = CallerContext.unresolved(principal_id, INACTIVE_PRINCIPAL)
        else:
            context = CallerContext.resolved(
                principal_id, principal.tenant_id, principal.role
            )

        if not context.is_resolved:
            logger.info(
                f"Context unresolved for principal {principal_id}: "
                f"{context.unresolved_reason}"
            )

        self.uow.bind(context)
        return context
