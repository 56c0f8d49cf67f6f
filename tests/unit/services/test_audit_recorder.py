"""
Unit tests for AuditRecorder

The recorder writes through its own unit of work and never raises.
"""

import logging
from datetime import datetime
from uuid import uuid4

import pytest
from unittest.mock import AsyncMock

from agency_iam.app.errors import DatastoreUnavailable
from agency_iam.app.services import AuditRecorder, json_safe
from agency_iam.domain.entities import AuditRecord, LinkageStatus


@pytest.mark.asyncio
async def test_record_writes_and_commits_in_own_unit_of_work(mock_uow):
    recorder = AuditRecorder(lambda: mock_uow)
    actor_id, tenant_id, entity_id = uuid4(), uuid4(), uuid4()

    await recorder.record(
        actor_id=actor_id,
        tenant_id=tenant_id,
        entity_type="linkage",
        entity_id=entity_id,
        action="update",
        old_values={"status": LinkageStatus.active},
        new_values={"status": LinkageStatus.completed},
    )

    mock_uow.audit_records.create.assert_called_once()
    record = mock_uow.audit_records.create.call_args.args[0]
    assert isinstance(record, AuditRecord)
    assert record.actor_id == actor_id
    assert record.tenant_id == tenant_id
    assert record.entity_id == entity_id
    assert record.old_values == {"status": "active"}
    assert record.new_values == {"status": "completed"}
    assert record.event_metadata is None
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_failed_write_is_logged_not_raised(mock_uow, caplog):
    mock_uow.audit_records.create = AsyncMock(side_effect=DatastoreUnavailable("down"))
    recorder = AuditRecorder(lambda: mock_uow)
    entity_id = uuid4()

    with caplog.at_level(logging.ERROR, logger="agency_iam.audit"):
        await recorder.record(
            actor_id=uuid4(),
            tenant_id=uuid4(),
            entity_type="principal",
            entity_id=entity_id,
            action="delete",
        )

    mock_uow.commit.assert_not_called()
    failures = [r for r in caplog.records if r.name == "agency_iam.audit"]
    assert len(failures) == 1
    assert str(entity_id) in failures[0].getMessage()
    assert failures[0].exc_info is not None


@pytest.mark.asyncio
async def test_failed_commit_is_logged_not_raised(mock_uow, caplog):
    mock_uow.commit = AsyncMock(side_effect=RuntimeError("commit failed"))
    recorder = AuditRecorder(lambda: mock_uow)

    with caplog.at_level(logging.ERROR, logger="agency_iam.audit"):
        await recorder.record(
            actor_id=None,
            tenant_id=uuid4(),
            entity_type="tenant",
            entity_id=uuid4(),
            action="tenant_provisioned",
        )

    assert any(r.name == "agency_iam.audit" for r in caplog.records)


def test_json_safe_converts_nested_values():
    moment = datetime(2024, 3, 1, 9, 30)
    value_id = uuid4()

    converted = json_safe(
        {"id": value_id, "status": LinkageStatus.cancelled, "at": [moment]}
    )

    assert converted == {
        "id": str(value_id),
        "status": "cancelled",
        "at": ["2024-03-01T09:30:00"],
    }
