import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.identities = MagicMock()
    uow.identities.get_by_email = AsyncMock(return_value=None)
    uow.identities.get_by_id = AsyncMock(return_value=None)
    uow.identities.update = AsyncMock()

    uow.tenants = MagicMock()
    uow.tenants.exists = AsyncMock(return_value=False)

    uow.memberships = MagicMock()
    uow.memberships.get_by_id = AsyncMock(return_value=None)
    uow.memberships.find_by_identity_id = AsyncMock(return_value=None)
    uow.memberships.insert = AsyncMock()
    uow.memberships.update = AsyncMock()

    uow.activity_log = MagicMock()
    uow.activity_log.append = AsyncMock()

    uow.recovery_tokens = MagicMock()
    uow.recovery_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.recovery_tokens.update = AsyncMock()

    return uow
