"""
Unit tests for principal use cases

The real policy rules run against mocked repositories.
"""

from uuid import uuid4

import pytest
from unittest.mock import AsyncMock

from agency_iam.app.errors import CONFLICT, DENIED, FORBIDDEN, NO_CONTEXT, EmailTaken
from agency_iam.app.use_cases.principals import (
    DeletePrincipalUseCase,
    GetMeUseCase,
    GetPrincipalUseCase,
    PrincipalPatch,
    UpdatePrincipalUseCase,
)
from agency_iam.domain.entities import PrincipalRole, PrincipalStatus, Tenant
from tests.factories import make_principal


@pytest.fixture
def tenant_id():
    return uuid4()


@pytest.fixture
def admin(tenant_id, known_principals):
    principal = make_principal(tenant_id=tenant_id, role=PrincipalRole.tenant_admin)
    known_principals(principal)
    return principal


@pytest.fixture
def member(tenant_id, known_principals):
    principal = make_principal(tenant_id=tenant_id, full_name="Mia Member")
    known_principals(principal)
    return principal


@pytest.mark.asyncio
async def test_get_me_returns_principal_tenant_and_context(mock_uow, member):
    mock_uow.tenants.get.return_value = Tenant(id=member.tenant_id, name="Acme Agency")

    result = await GetMeUseCase(mock_uow).execute(str(member.id))

    assert result.is_ok()
    me = result.value
    assert me.principal.id == str(member.id)
    assert me.tenant.name == "Acme Agency"
    assert me.context.resolved is True
    assert me.context.role == "tenant_member"


@pytest.mark.asyncio
async def test_get_me_for_suspended_principal_falls_back_to_self(
    mock_uow, known_principals
):
    suspended = make_principal(status=PrincipalStatus.suspended)
    known_principals(suspended)

    result = await GetMeUseCase(mock_uow).execute(str(suspended.id))

    assert result.is_ok()
    assert result.value.principal.status == "suspended"
    assert result.value.tenant is None
    assert result.value.context.resolved is False
    assert result.value.context.reason == "inactive_principal"
    mock_uow.tenants.get.assert_not_called()


@pytest.mark.asyncio
async def test_get_me_unknown_identity_is_denied(mock_uow, known_principals):
    result = await GetMeUseCase(mock_uow).execute(str(uuid4()))

    assert result.is_err()
    assert result.error.code == DENIED
    assert result.error.reason == NO_CONTEXT


@pytest.mark.asyncio
async def test_get_principal_not_visible(mock_uow, member):
    result = await GetPrincipalUseCase(mock_uow).execute(str(member.id), uuid4())

    assert result.is_err()
    assert result.error.code == DENIED


@pytest.mark.asyncio
async def test_member_updates_own_profile(mock_uow, mock_audit, member):
    use_case = UpdatePrincipalUseCase(mock_uow, mock_audit)
    patch = PrincipalPatch(full_name="Mia Renamed")

    result = await use_case.execute(str(member.id), member.id, patch)

    assert result.is_ok()
    assert result.value.full_name == "Mia Renamed"
    mock_uow.principals.update.assert_called_once()
    mock_uow.commit.assert_called_once()

    audit = mock_audit.record.call_args.kwargs
    assert audit["action"] == "update"
    assert audit["actor_id"] == member.id
    assert audit["old_values"] == {"full_name": "Mia Member"}
    assert audit["new_values"] == {"full_name": "Mia Renamed"}


@pytest.mark.asyncio
async def test_member_cannot_promote_self(mock_uow, mock_audit, member):
    use_case = UpdatePrincipalUseCase(mock_uow, mock_audit)
    patch = PrincipalPatch(full_name="Mia Boss", role=PrincipalRole.tenant_admin)

    result = await use_case.execute(str(member.id), member.id, patch)

    assert result.is_err()
    assert result.error.code == DENIED
    assert result.error.reason == FORBIDDEN
    mock_uow.principals.update.assert_not_called()
    mock_uow.commit.assert_not_called()
    mock_audit.record.assert_not_called()


@pytest.mark.asyncio
async def test_admin_changes_member_role(mock_uow, mock_audit, admin, member):
    use_case = UpdatePrincipalUseCase(mock_uow, mock_audit)
    patch = PrincipalPatch(role=PrincipalRole.tenant_admin)

    result = await use_case.execute(str(admin.id), member.id, patch)

    assert result.is_ok()
    assert result.value.role == "tenant_admin"
    audit = mock_audit.record.call_args.kwargs
    assert audit["actor_id"] == admin.id
    assert audit["tenant_id"] == member.tenant_id
    assert audit["old_values"] == {"role": PrincipalRole.tenant_member}


@pytest.mark.asyncio
async def test_admin_cannot_demote_self(mock_uow, mock_audit, admin):
    use_case = UpdatePrincipalUseCase(mock_uow, mock_audit)
    patch = PrincipalPatch(role=PrincipalRole.tenant_member)

    result = await use_case.execute(str(admin.id), admin.id, patch)

    assert result.is_err()
    assert result.error.code == DENIED
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_noop_patch_writes_no_audit(mock_uow, mock_audit, member):
    use_case = UpdatePrincipalUseCase(mock_uow, mock_audit)
    patch = PrincipalPatch(full_name="Mia Member")

    result = await use_case.execute(str(member.id), member.id, patch)

    assert result.is_ok()
    mock_uow.principals.update.assert_not_called()
    mock_audit.record.assert_not_called()


@pytest.mark.asyncio
async def test_duplicate_email_is_conflict(mock_uow, mock_audit, member):
    mock_uow.principals.update = AsyncMock(side_effect=EmailTaken("taken@x.io"))
    use_case = UpdatePrincipalUseCase(mock_uow, mock_audit)
    patch = PrincipalPatch(email="taken@acme-agency.com")

    result = await use_case.execute(str(member.id), member.id, patch)

    assert result.is_err()
    assert result.error.code == CONFLICT
    mock_uow.commit.assert_not_called()
    mock_uow.rollback.assert_called_once()
    mock_audit.record.assert_not_called()


@pytest.mark.asyncio
async def test_admin_deletes_member_with_audit_snapshot(
    mock_uow, mock_audit, admin, member
):
    use_case = DeletePrincipalUseCase(mock_uow, mock_audit)

    result = await use_case.execute(str(admin.id), member.id)

    assert result.is_ok()
    assert result.value.status == "deleted"
    mock_uow.principals.delete.assert_called_once()
    mock_uow.commit.assert_called_once()

    audit = mock_audit.record.call_args.kwargs
    assert audit["action"] == "delete"
    assert audit["entity_id"] == member.id
    assert audit["old_values"]["email"] == member.email
    assert audit["old_values"]["role"] == "tenant_member"
    assert audit.get("new_values") is None
