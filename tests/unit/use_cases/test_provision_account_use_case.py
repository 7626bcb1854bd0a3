import asyncio
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from partner_iam.app.services.identity_provider import (
    IdentityAlreadyExistsError,
    IdentityProviderError,
)
from partner_iam.app.services.provisioning_locks import ProvisioningLockRegistry
from partner_iam.app.use_cases.provisioning import ProvisionAccountCommand, ProvisionAccountUseCase
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import AccessRole, Identity

SUPERADMIN = ResolvedAccess(role=AccessRole.superadmin)
ADMIN = ResolvedAccess(role=AccessRole.admin)
PARTNER = ResolvedAccess(role=AccessRole.partner, tenant_id="tenant-acme")


@pytest.fixture
def identity_provider():
    provider = MagicMock()
    provider.create_identity = AsyncMock(return_value=uuid4())
    provider.delete_identity = AsyncMock()
    provider.generate_recovery_link = AsyncMock(
        return_value="http://localhost:5173/auth/set-password?token=abc"
    )
    return provider


@pytest.fixture
def locks():
    return ProvisioningLockRegistry()


@pytest.fixture
def use_case(mock_uow, identity_provider, locks):
    mock_uow.tenants.exists.return_value = True
    mock_uow.memberships.insert.side_effect = lambda membership: membership
    return ProvisionAccountUseCase(mock_uow, identity_provider, locks)


def partner_command(**overrides):
    data = {
        "email": "new@acme.com",
        "full_name": "New Partner",
        "role": "partner",
        "tenant_id": "tenant-acme",
    }
    data.update(overrides)
    return ProvisionAccountCommand(**data)


@pytest.mark.asyncio
async def test_partner_provisioned_with_viewer_membership(use_case, mock_uow, identity_provider):
    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.is_ok()
    response = result.value
    assert response.success is True
    assert response.recovery_link.endswith("token=abc")
    assert response.states == [
        "pending",
        "identity_created",
        "membership_created",
        "link_generated",
        "logged",
        "completed",
    ]

    membership = mock_uow.memberships.insert.call_args.args[0]
    assert membership.role == "viewer"
    assert membership.tenant_id == "tenant-acme"
    assert membership.identity_id == identity_provider.create_identity.return_value
    assert str(membership.id) == response.membership_id
    identity_provider.delete_identity.assert_not_called()


@pytest.mark.asyncio
async def test_temp_credential_and_normalized_email(use_case, identity_provider):
    await use_case.execute(partner_command(email="  New@Acme.COM "), SUPERADMIN)

    email, temp_credential = identity_provider.create_identity.call_args.args[:2]
    assert email == "new@acme.com"
    assert temp_credential.startswith("Ptl!")
    assert len(temp_credential) > len("Ptl!") + 16


@pytest.mark.asyncio
async def test_superadmin_provisions_admin(use_case, mock_uow, identity_provider):
    result = await use_case.execute(
        partner_command(role="admin", tenant_id=None), SUPERADMIN
    )

    assert result.is_ok()
    membership = mock_uow.memberships.insert.call_args.args[0]
    assert membership.role == "admin"
    assert membership.tenant_id is None
    metadata = identity_provider.create_identity.call_args.kwargs["metadata"]
    assert metadata["role"] == "admin"


@pytest.mark.asyncio
async def test_admin_cannot_create_admin(use_case, identity_provider):
    result = await use_case.execute(partner_command(role="admin", tenant_id=None), ADMIN)

    assert result.is_err()
    assert result.error.code == "AUTHORIZATION_ERROR"
    identity_provider.create_identity.assert_not_called()


@pytest.mark.asyncio
async def test_partner_requester_forbidden(use_case, identity_provider):
    result = await use_case.execute(partner_command(), PARTNER)

    assert result.error.code == "AUTHORIZATION_ERROR"
    identity_provider.create_identity.assert_not_called()


@pytest.mark.asyncio
async def test_partner_requires_tenant(use_case, identity_provider):
    result = await use_case.execute(partner_command(tenant_id=None), SUPERADMIN)

    assert result.error.code == "VALIDATION_ERROR"
    assert result.error.message == "tenant_id is required for partner users"
    identity_provider.create_identity.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"email": ""}, {"full_name": "   "}, {"role": "owner"}],
)
async def test_invalid_fields_rejected(use_case, identity_provider, overrides):
    result = await use_case.execute(partner_command(**overrides), SUPERADMIN)

    assert result.error.code == "VALIDATION_ERROR"
    identity_provider.create_identity.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_tenant_rejected(use_case, mock_uow, identity_provider):
    mock_uow.tenants.exists.return_value = False

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.error.code == "VALIDATION_ERROR"
    identity_provider.create_identity.assert_not_called()


@pytest.mark.asyncio
async def test_existing_email_conflict(use_case, mock_uow, identity_provider):
    mock_uow.identities.get_by_email.return_value = Identity(
        email="new@acme.com", password_hash="x"
    )

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.error.code == "CONFLICT_ERROR"
    identity_provider.create_identity.assert_not_called()


@pytest.mark.asyncio
async def test_provider_reports_existing_identity(use_case, identity_provider):
    identity_provider.create_identity.side_effect = IdentityAlreadyExistsError("new@acme.com")

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.error.code == "CONFLICT_ERROR"


@pytest.mark.asyncio
async def test_identity_creation_failure_needs_no_compensation(
    use_case, mock_uow, identity_provider
):
    identity_provider.create_identity.side_effect = IdentityProviderError("down")

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.error.code == "DEPENDENCY_ERROR"
    mock_uow.memberships.insert.assert_not_called()
    identity_provider.delete_identity.assert_not_called()


@pytest.mark.asyncio
async def test_membership_failure_deletes_identity(use_case, mock_uow, identity_provider):
    identity_id = uuid4()
    identity_provider.create_identity.return_value = identity_id
    mock_uow.memberships.insert.side_effect = RuntimeError("insert failed")

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.is_err()
    assert result.error.code == "DEPENDENCY_ERROR"
    identity_provider.delete_identity.assert_awaited_once_with(identity_id)
    assert result.error.details["states"][-2:] == ["compensating", "compensated_ok"]
    identity_provider.generate_recovery_link.assert_not_called()
    mock_uow.activity_log.append.assert_not_called()


@pytest.mark.asyncio
async def test_failed_compensation_reports_orphan(use_case, mock_uow, identity_provider):
    identity_id = uuid4()
    identity_provider.create_identity.return_value = identity_id
    mock_uow.memberships.insert.side_effect = RuntimeError("insert failed")
    identity_provider.delete_identity.side_effect = IdentityProviderError("delete failed")

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.error.code == "COMPENSATION_FAILURE"
    assert result.error.details["orphaned_identity_id"] == str(identity_id)
    assert result.error.details["states"][-1] == "compensation_failure"


@pytest.mark.asyncio
async def test_recovery_link_failure_is_not_fatal(use_case, identity_provider):
    identity_provider.generate_recovery_link.side_effect = IdentityProviderError("smtp down")

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.is_ok()
    assert result.value.recovery_link is None
    assert "link_skipped" in result.value.states
    identity_provider.delete_identity.assert_not_called()


@pytest.mark.asyncio
async def test_activity_log_failure_is_not_fatal(use_case, mock_uow, identity_provider):
    mock_uow.activity_log.append.side_effect = RuntimeError("log store down")

    result = await use_case.execute(partner_command(), SUPERADMIN)

    assert result.is_ok()
    assert "logged" not in result.value.states
    assert result.value.outcome == "completed"
    identity_provider.delete_identity.assert_not_called()


@pytest.mark.asyncio
async def test_activity_entry_describes_creation(use_case, mock_uow):
    requester = Identity(email="root@portal.com", password_hash="x")

    await use_case.execute(partner_command(), SUPERADMIN, requester=requester)

    entry = mock_uow.activity_log.append.call_args.args[0]
    assert entry.activity_type == "user_created"
    assert entry.actor_email == "root@portal.com"
    assert entry.target_email == "new@acme.com"
    assert entry.description == "Created partner user: New Partner (new@acme.com)"


@pytest.mark.asyncio
async def test_lock_released_after_success_and_failure(use_case, locks, identity_provider):
    await use_case.execute(partner_command(), SUPERADMIN)
    assert not locks.is_held("new@acme.com")

    identity_provider.create_identity.side_effect = IdentityProviderError("down")
    await use_case.execute(partner_command(), SUPERADMIN)
    assert not locks.is_held("new@acme.com")


@pytest.mark.asyncio
async def test_concurrent_same_email_creates_once(use_case, identity_provider):
    """Two sagas for one email: exactly one creates, the other gets a conflict"""

    async def slow_create(email, temp_credential, metadata=None):
        await asyncio.sleep(0.01)
        return uuid4()

    identity_provider.create_identity.side_effect = slow_create

    first, second = await asyncio.gather(
        use_case.execute(partner_command(), SUPERADMIN),
        use_case.execute(partner_command(email="NEW@acme.com"), SUPERADMIN),
    )

    outcomes = sorted([first.is_ok(), second.is_ok()])
    assert outcomes == [False, True]
    failed = first if first.is_err() else second
    assert failed.error.code == "CONFLICT_ERROR"
    assert identity_provider.create_identity.await_count == 1
