"""
End to end: an agency enrols a student, another agency cannot see the
enrolment, completion frees the key for a fresh enrolment.
"""

from uuid import UUID, uuid4

import pytest
from sqlmodel import select

from agency_iam.app.errors import DENIED
from agency_iam.app.use_cases.linkages import (
    FindOrCreateLinkageUseCase,
    GetLinkageUseCase,
    UpdateLinkageStatusUseCase,
)
from agency_iam.domain.entities import AuditRecord


@pytest.mark.asyncio
async def test_enrollment_lifecycle_across_agencies(
    world, uow_factory, audit_recorder, db_session
):
    student, branch = uuid4(), uuid4()

    first = await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity, student, branch, "BSc"
    )
    assert first.value.reused is False
    l1 = UUID(first.value.linkage.id)

    peek = await GetLinkageUseCase(uow_factory()).execute(world.admin_b.identity, l1)
    assert peek.is_err()
    assert peek.error.code == DENIED

    completed = await UpdateLinkageStatusUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity, l1, "completed"
    )
    assert completed.is_ok()

    update = (
        await db_session.execute(
            select(AuditRecord).where(
                AuditRecord.entity_id == l1, AuditRecord.action == "update"
            )
        )
    ).scalar_one()
    assert update.actor_id == world.admin_a.id
    assert update.old_values == {"status": "active"}
    assert update.new_values == {"status": "completed"}

    second = await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity, student, branch, "BSc"
    )
    assert second.value.reused is False
    assert UUID(second.value.linkage.id) != l1
