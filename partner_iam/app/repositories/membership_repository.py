from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from partner_iam.domain.entities import Membership


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, membership_id: UUID) -> Optional[Membership]:
        """Get membership by ID"""
        pass

    @abstractmethod
    async def find_by_identity_id(self, identity_id: UUID) -> Optional[Membership]:
        """Get the membership of an identity, None if it has none"""
        pass

    @abstractmethod
    async def insert(self, membership: Membership) -> Membership:
        """Insert a new membership"""
        pass

    @abstractmethod
    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        pass
