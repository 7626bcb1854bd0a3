"""
Identity provider contract.

The provider owns Identity records and credentials. Each call is its own
transaction: once create_identity returns, the identity exists regardless of
what the caller does next.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from partner_iam.domain.entities import Identity


class IdentityProviderError(Exception):
    """An identity provider call failed"""


class IdentityAlreadyExistsError(IdentityProviderError):
    """An identity with this email already exists"""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Identity already exists for {email}")


class IIdentityProvider(ABC):
    """Identity provider interface - application layer"""

    @abstractmethod
    async def create_identity(
        self, email: str, temp_credential: str, metadata: Optional[Dict[str, Any]] = None
    ) -> UUID:
        """
        Create a confirmed identity with a one-time credential.

        Raises:
            IdentityAlreadyExistsError: email is taken
            IdentityProviderError: any other failure
        """
        pass

    @abstractmethod
    async def delete_identity(self, identity_id: UUID) -> None:
        """Delete an identity. Raises IdentityProviderError on failure."""
        pass

    @abstractmethod
    async def generate_recovery_link(self, email: str) -> Optional[str]:
        """Create a credential-recovery link, None if the email is unknown"""
        pass

    @abstractmethod
    async def get_current_identity(self, session_token: str) -> Optional[Identity]:
        """Identity behind a session token, None if the token is invalid"""
        pass
