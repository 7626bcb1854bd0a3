"""
Confirm Recovery Use Case

Sets a new credential through a recovery link token.
"""

import hashlib
import bcrypt

from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.base import utcnow
from partner_iam.domain.entities import ActivityLogEntry
from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error, Result, Return
from .dtos import ConfirmRecoveryResponse


class ConfirmRecoveryUseCase:
    """
    Use case for confirming a credential recovery.

    Business Rules:
    - Token is validated by hashing and comparing with stored hash
    - Token must not be expired or already used
    - New password must be at least 8 characters
    - Password is hashed with bcrypt (cost factor 12)
    - Token is marked as used after successful reset
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str, new_password: str) -> Result[ConfirmRecoveryResponse]:
        if len(new_password) < 8:
            return Return.err(
                Error(
                    ErrorKind.validation.value,
                    "Password must be at least 8 characters long",
                )
            )

        async with self.uow:
            token_hash = hashlib.sha256(token.encode()).hexdigest()
            recovery_token = await self.uow.recovery_tokens.get_by_token_hash(token_hash)

            if recovery_token is None:
                return Return.err(
                    Error(ErrorKind.validation.value, "Invalid or expired recovery token")
                )

            if recovery_token.expires_at < utcnow():
                return Return.err(
                    Error(ErrorKind.validation.value, "Recovery token has expired")
                )

            if recovery_token.used:
                return Return.err(
                    Error(ErrorKind.validation.value, "Recovery token has already been used")
                )

            identity = await self.uow.identities.get_by_id(recovery_token.identity_id)
            if identity is None:
                return Return.err(Error(ErrorKind.not_found.value, "Identity not found"))

            password_hash = bcrypt.hashpw(new_password.encode(), bcrypt.gensalt(12))
            identity.password_hash = password_hash.decode()
            await self.uow.identities.update(identity)

            recovery_token.used = True
            await self.uow.recovery_tokens.update(recovery_token)

            await self.uow.activity_log.append(
                ActivityLogEntry(
                    activity_type="credential_recovered",
                    actor_id=identity.id,
                    actor_email=identity.email,
                    target_email=identity.email,
                    description=f"Credential set through recovery link ({identity.email})",
                    event_metadata={"token_id": str(recovery_token.id)},
                )
            )

            await self.uow.commit()

            return Return.ok(
                ConfirmRecoveryResponse(
                    status="success",
                    message="Password has been set successfully",
                )
            )
