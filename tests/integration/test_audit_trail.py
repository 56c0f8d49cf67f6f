"""
Audit trail completeness and retention.
"""

import logging
from uuid import UUID, uuid4

import pytest
from sqlmodel import select

from agency_iam.app.errors import DENIED, FORBIDDEN, DatastoreUnavailable
from agency_iam.app.services import AuditRecorder
from agency_iam.app.use_cases.audit import GetAuditRecordsUseCase
from agency_iam.app.use_cases.linkages import (
    FindOrCreateLinkageUseCase,
    UpdateLinkageStatusUseCase,
)
from agency_iam.app.use_cases.principals import PrincipalPatch, UpdatePrincipalUseCase
from agency_iam.app.use_cases.provisioning import (
    PurgeTenantUseCase,
    TenantSettingsPatch,
    UpdateTenantSettingsUseCase,
)
from agency_iam.domain.entities import AuditRecord, Linkage


async def records_for(db_session, entity_id):
    result = await db_session.execute(
        select(AuditRecord)
        .where(AuditRecord.entity_id == entity_id)
        .order_by(AuditRecord.created_at)
    )
    return list(result.scalars().all())


@pytest.mark.asyncio
async def test_provisioning_is_audited_without_actor(world, db_session):
    tenant_records = await records_for(db_session, world.tenant_a.id)
    principal_records = await records_for(db_session, world.member_a.id)

    assert [r.action for r in tenant_records] == ["tenant_provisioned"]
    assert tenant_records[0].actor_id is None
    assert tenant_records[0].new_values["name"] == "Agency A"

    assert [r.action for r in principal_records] == ["principal_provisioned"]
    assert principal_records[0].tenant_id == world.tenant_a.id
    assert principal_records[0].new_values["role"] == "tenant_member"


@pytest.mark.asyncio
async def test_linkage_lifecycle_is_audited(world, uow_factory, audit_recorder, db_session):
    created = await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
        world.member_a.identity, uuid4(), uuid4(), "BSc", consumer="enrolment"
    )
    linkage_id = UUID(created.value.linkage.id)
    await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity,
        UUID(created.value.linkage.subject_id),
        UUID(created.value.linkage.target_id),
        "BSc",
    )
    await UpdateLinkageStatusUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity, linkage_id, "completed"
    )

    records = await records_for(db_session, linkage_id)

    assert [r.action for r in records] == ["create", "reuse", "update"]
    create, reuse, update = records
    assert create.actor_id == world.member_a.id
    assert create.tenant_id == world.tenant_a.id
    assert create.old_values is None
    assert create.new_values["descriptor"] == "BSc"
    assert create.event_metadata == {"consumer": "enrolment"}
    assert reuse.actor_id == world.admin_a.id
    assert reuse.event_metadata["reason"] == "active_match"
    assert update.old_values == {"status": "active"}
    assert update.new_values == {"status": "completed"}


@pytest.mark.asyncio
async def test_principal_update_records_changed_fields_only(
    world, uow_factory, audit_recorder, db_session
):
    await UpdatePrincipalUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity,
        world.member_a.id,
        PrincipalPatch(full_name="Mia Member", role="tenant_member"),
    )

    update = (await records_for(db_session, world.member_a.id))[-1]

    assert update.action == "update"
    assert update.actor_id == world.admin_a.id
    assert update.old_values == {"full_name": "member@agency-a.com"}
    assert update.new_values == {"full_name": "Mia Member"}


@pytest.mark.asyncio
async def test_rejected_mutation_is_not_audited(world, uow_factory, audit_recorder, db_session):
    before = await records_for(db_session, world.admin_a.id)

    result = await UpdatePrincipalUseCase(uow_factory(), audit_recorder).execute(
        world.member_a.identity, world.admin_a.id, PrincipalPatch(full_name="Nope")
    )

    assert result.is_err()
    assert len(await records_for(db_session, world.admin_a.id)) == len(before)


@pytest.mark.asyncio
async def test_tenant_settings_update_is_audited(world, provisioning_uow_factory, audit_recorder, db_session):
    result = await UpdateTenantSettingsUseCase(
        provisioning_uow_factory(), audit_recorder
    ).execute(world.tenant_a.id, TenantSettingsPatch(currency="NZD"))

    assert result.value.currency == "NZD"
    update = (await records_for(db_session, world.tenant_a.id))[-1]
    assert update.action == "tenant_updated"
    assert update.old_values == {"currency": "AUD"}
    assert update.new_values == {"currency": "NZD"}


@pytest.mark.asyncio
async def test_purge_keeps_audit_trail(
    world, uow_factory, provisioning_uow_factory, audit_recorder, db_session
):
    created = await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
        world.admin_a.identity, uuid4(), uuid4(), "BSc"
    )

    result = await PurgeTenantUseCase(provisioning_uow_factory(), audit_recorder).execute(
        world.tenant_a.id
    )

    assert result.value.purged == {"linkages": 1, "principals": 2, "tenants": 1}
    remaining = await db_session.execute(
        select(Linkage).where(Linkage.tenant_id == world.tenant_a.id)
    )
    assert remaining.scalars().all() == []

    linkage_records = await records_for(db_session, UUID(created.value.linkage.id))
    assert [r.action for r in linkage_records] == ["create"]
    tenant_records = await records_for(db_session, world.tenant_a.id)
    assert tenant_records[-1].action == "tenant_purged"
    assert tenant_records[-1].event_metadata["purged"]["principals"] == 2


@pytest.mark.asyncio
async def test_audit_failure_does_not_undo_mutation(world, uow_factory, db_session, caplog):
    def unavailable_factory():
        raise DatastoreUnavailable("audit store down")

    broken_recorder = AuditRecorder(unavailable_factory)
    student = uuid4()

    with caplog.at_level(logging.ERROR, logger="agency_iam.audit"):
        result = await FindOrCreateLinkageUseCase(uow_factory(), broken_recorder).execute(
            world.admin_a.identity, student, uuid4(), "BSc"
        )

    assert result.is_ok()
    stored = await db_session.execute(select(Linkage).where(Linkage.subject_id == student))
    assert len(stored.scalars().all()) == 1
    assert "Failed to write audit record" in caplog.text


@pytest.mark.asyncio
async def test_admin_reads_own_tenant_trail(world, uow_factory, audit_recorder):
    await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
        world.admin_b.identity, uuid4(), uuid4(), "BSc"
    )

    result = await GetAuditRecordsUseCase(uow_factory()).execute(world.admin_a.identity)

    assert result.is_ok()
    entity_ids = {r.entity_id for r in result.value.records}
    assert str(world.tenant_a.id) in entity_ids
    assert str(world.member_a.id) in entity_ids
    assert str(world.tenant_b.id) not in entity_ids
    assert all(r.entity_type != "linkage" for r in result.value.records)


@pytest.mark.asyncio
async def test_member_cannot_read_trail(world, uow_factory):
    result = await GetAuditRecordsUseCase(uow_factory()).execute(world.member_a.identity)

    assert result.error.code == DENIED
    assert result.error.reason == FORBIDDEN


@pytest.mark.asyncio
async def test_trail_pages_newest_first(world, uow_factory, audit_recorder):
    for _ in range(3):
        await FindOrCreateLinkageUseCase(uow_factory(), audit_recorder).execute(
            world.admin_a.identity, uuid4(), uuid4(), "BSc"
        )

    first = await GetAuditRecordsUseCase(uow_factory()).execute(
        world.admin_a.identity, limit=2, entity_type="linkage"
    )
    second = await GetAuditRecordsUseCase(uow_factory()).execute(
        world.admin_a.identity, limit=2, cursor=first.value.next_cursor, entity_type="linkage"
    )

    assert len(first.value.records) == 2
    assert first.value.next_cursor is not None
    assert first.value.records[0].timestamp >= first.value.records[1].timestamp
    assert len(second.value.records) == 1
    assert second.value.next_cursor is None
    seen = [r.id for r in first.value.records + second.value.records]
    assert len(set(seen)) == 3
