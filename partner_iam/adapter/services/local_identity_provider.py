"""
Identity provider backed by the service database.

Every call runs in its own transaction and commits before returning, so the
provisioning saga sees it as an external step that must be compensated, not
rolled back.
"""

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Any, Dict, Optional
from urllib.parse import urlencode
from uuid import UUID

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from partner_iam.api.utils.jwt import verify_jwt
from partner_iam.app.services.identity_provider import (
    IIdentityProvider,
    IdentityAlreadyExistsError,
    IdentityProviderError,
)
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.base import utcnow
from partner_iam.domain.entities import Identity, RecoveryToken

logger = logging.getLogger(__name__)


class LocalIdentityProvider(IIdentityProvider):
    def __init__(self, uow: UnitOfWork, portal_url: str, recovery_token_ttl_minutes: int = 60):
        self.uow = uow
        self.portal_url = portal_url.rstrip("/")
        self.recovery_token_ttl_minutes = recovery_token_ttl_minutes

    async def create_identity(
        self, email: str, temp_credential: str, metadata: Optional[Dict[str, Any]] = None
    ) -> UUID:
        metadata = dict(metadata or {})
        try:
            async with self.uow:
                if await self.uow.identities.get_by_email(email) is not None:
                    raise IdentityAlreadyExistsError(email)

                password_hash = bcrypt.hashpw(temp_credential.encode("utf-8"), bcrypt.gensalt(12))
                identity = await self.uow.identities.create(
                    Identity(
                        email=email,
                        password_hash=password_hash.decode("utf-8"),
                        full_name=metadata.get("full_name"),
                        email_confirmed=True,
                        identity_metadata=metadata,
                    )
                )
                identity_id = identity.id
                await self.uow.commit()
        except IntegrityError as exc:
            # Unique email constraint lost a race with another writer
            raise IdentityAlreadyExistsError(email) from exc
        except SQLAlchemyError as exc:
            raise IdentityProviderError(f"Failed to create identity for {email}") from exc

        logger.info("Identity %s created for %s", identity_id, email)
        return identity_id

    async def delete_identity(self, identity_id: UUID) -> None:
        try:
            async with self.uow:
                identity = await self.uow.identities.get_by_id(identity_id)
                if identity is None:
                    logger.info("Identity %s already absent", identity_id)
                    return
                await self.uow.identities.delete(identity)
                await self.uow.commit()
        except SQLAlchemyError as exc:
            raise IdentityProviderError(f"Failed to delete identity {identity_id}") from exc

        logger.info("Identity %s deleted", identity_id)

    async def generate_recovery_link(self, email: str) -> Optional[str]:
        try:
            async with self.uow:
                identity = await self.uow.identities.get_by_email(email)
                if identity is None:
                    return None

                token = secrets.token_urlsafe(32)
                await self.uow.recovery_tokens.create(
                    RecoveryToken(
                        identity_id=identity.id,
                        token_hash=hashlib.sha256(token.encode()).hexdigest(),
                        expires_at=utcnow() + timedelta(minutes=self.recovery_token_ttl_minutes),
                    )
                )
                await self.uow.commit()
        except SQLAlchemyError as exc:
            raise IdentityProviderError(f"Failed to create recovery link for {email}") from exc

        return f"{self.portal_url}/auth/set-password?{urlencode({'token': token})}"

    async def get_current_identity(self, session_token: str) -> Optional[Identity]:
        payload = verify_jwt(session_token)
        if payload is None:
            return None

        try:
            identity_id = UUID(payload["identity_id"])
        except (KeyError, TypeError, ValueError):
            return None

        async with self.uow:
            return await self.uow.identities.get_by_id(identity_id)
