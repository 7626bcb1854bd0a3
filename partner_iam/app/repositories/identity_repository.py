from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from partner_iam.domain.entities import Identity


class IIdentityRepository(ABC):
    """Identity repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by email address"""
        pass

    @abstractmethod
    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        pass

    @abstractmethod
    async def create(self, identity: Identity) -> Identity:
        """Create a new identity"""
        pass

    @abstractmethod
    async def update(self, identity: Identity) -> Identity:
        """Update existing identity"""
        pass

    @abstractmethod
    async def delete(self, identity: Identity) -> None:
        """Delete an identity"""
        pass
