"""
Login Use Case

Verifies credentials and issues a session token.
"""

import bcrypt
from uuid import uuid4

from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.base import utcnow
from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error, Result, Return
from partner_iam.api.utils.jwt import generate_jwt
from .dtos import LoginResponse


class LoginUseCase:
    """
    Use case for identity login and session token issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Token carries identity_id and a fresh session id, never a role
    - Roles are resolved per request, so a disabled membership still logs in
      but resolves to unknown access
    - Updates identity.last_login_at
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        async with self.uow:
            identity = await self.uow.identities.get_by_email(email.strip().lower())

            if identity is None:
                # Hash check anyway to keep timing constant
                bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(12))
                return Return.err(
                    Error(ErrorKind.authentication.value, "Invalid email or password")
                )

            if not bcrypt.checkpw(password.encode(), identity.password_hash.encode()):
                return Return.err(
                    Error(ErrorKind.authentication.value, "Invalid email or password")
                )

            identity.last_login_at = utcnow()
            await self.uow.identities.update(identity)
            await self.uow.commit()

            access_token = generate_jwt(identity_id=identity.id, session_id=str(uuid4()))

            return Return.ok(
                LoginResponse(access_token=access_token, identity_id=str(identity.id))
            )
