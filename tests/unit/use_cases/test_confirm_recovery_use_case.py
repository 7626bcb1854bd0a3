import hashlib
from datetime import timedelta
from uuid import uuid4

import bcrypt
import pytest

from partner_iam.app.use_cases.auth import ConfirmRecoveryUseCase
from partner_iam.domain.base import utcnow
from partner_iam.domain.entities import Identity, RecoveryToken

TOKEN = "recovery-token"


def make_token(identity_id, expires_in=timedelta(minutes=30), used=False):
    return RecoveryToken(
        id=uuid4(),
        identity_id=identity_id,
        token_hash=hashlib.sha256(TOKEN.encode()).hexdigest(),
        used=used,
        expires_at=utcnow() + expires_in,
    )


@pytest.mark.asyncio
async def test_password_set_and_token_consumed(mock_uow):
    identity = Identity(id=uuid4(), email="jane@acme.com", password_hash="old")
    token = make_token(identity.id)
    mock_uow.recovery_tokens.get_by_token_hash.return_value = token
    mock_uow.identities.get_by_id.return_value = identity

    result = await ConfirmRecoveryUseCase(mock_uow).execute(TOKEN, "BrandNewPass1")

    assert result.is_ok()
    mock_uow.recovery_tokens.get_by_token_hash.assert_awaited_once_with(token.token_hash)
    assert bcrypt.checkpw(b"BrandNewPass1", identity.password_hash.encode())
    assert token.used is True
    assert mock_uow.activity_log.append.call_args.args[0].activity_type == "credential_recovered"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_short_password(mock_uow):
    result = await ConfirmRecoveryUseCase(mock_uow).execute(TOKEN, "short")

    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.recovery_tokens.get_by_token_hash.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_token(mock_uow):
    result = await ConfirmRecoveryUseCase(mock_uow).execute(TOKEN, "BrandNewPass1")

    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_expired_token(mock_uow):
    mock_uow.recovery_tokens.get_by_token_hash.return_value = make_token(
        uuid4(), expires_in=timedelta(minutes=-1)
    )

    result = await ConfirmRecoveryUseCase(mock_uow).execute(TOKEN, "BrandNewPass1")

    assert result.error.message == "Recovery token has expired"


@pytest.mark.asyncio
async def test_used_token(mock_uow):
    mock_uow.recovery_tokens.get_by_token_hash.return_value = make_token(uuid4(), used=True)

    result = await ConfirmRecoveryUseCase(mock_uow).execute(TOKEN, "BrandNewPass1")

    assert result.error.message == "Recovery token has already been used"


@pytest.mark.asyncio
async def test_identity_gone(mock_uow):
    mock_uow.recovery_tokens.get_by_token_hash.return_value = make_token(uuid4())

    result = await ConfirmRecoveryUseCase(mock_uow).execute(TOKEN, "BrandNewPass1")

    assert result.error.code == "NOT_FOUND"
