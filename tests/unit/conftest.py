import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.principals = MagicMock()
    uow.principals.get_by_id = AsyncMock(return_value=None)
    uow.principals.get_by_email = AsyncMock(return_value=None)
    uow.principals.list_by_tenant = AsyncMock(return_value=[])
    uow.principals.update = AsyncMock(side_effect=lambda context, p: p)
    uow.principals.delete = AsyncMock()
    uow.principals.create = AsyncMock(side_effect=lambda p: p)

    uow.tenants = MagicMock()
    uow.tenants.get = AsyncMock(return_value=None)
    uow.tenants.get_by_id = AsyncMock(return_value=None)
    uow.tenants.create = AsyncMock(side_effect=lambda t: t)
    uow.tenants.update = AsyncMock(side_effect=lambda t: t)
    uow.tenants.purge = AsyncMock(return_value={})

    uow.linkages = MagicMock()
    uow.linkages.get_by_id = AsyncMock(return_value=None)
    uow.linkages.find_active = AsyncMock(return_value=None)
    uow.linkages.list_by_tenant = AsyncMock(return_value=[])
    uow.linkages.lock_key = AsyncMock()
    uow.linkages.create = AsyncMock(side_effect=lambda context, l: l)
    uow.linkages.update = AsyncMock(side_effect=lambda context, l: l)

    uow.audit_records = MagicMock()
    uow.audit_records.create = AsyncMock()
    uow.audit_records.get_by_tenant_paginated = AsyncMock(return_value=([], None))
    return uow


@pytest.fixture
def mock_audit():
    audit = MagicMock()
    audit.record = AsyncMock()
    return audit


@pytest.fixture
def known_principals(mock_uow):
    """
    Register principals the mocked repository returns by id.

    Returns a function: known_principals(*principals)
    """
    registry = {}

    async def get_by_id(context, principal_id):
        return registry.get(principal_id)

    mock_uow.principals.get_by_id.side_effect = get_by_id

    def register(*principals):
        for principal in principals:
            registry[principal.id] = principal

    return register
