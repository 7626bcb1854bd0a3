from abc import ABC, abstractmethod
from typing import Optional

from partner_iam.domain.entities import RecoveryToken


class IRecoveryTokenRepository(ABC):
    """RecoveryToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RecoveryToken) -> RecoveryToken:
        """Create a new recovery token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[RecoveryToken]:
        """Get recovery token by token hash"""
        pass

    @abstractmethod
    async def update(self, token: RecoveryToken) -> RecoveryToken:
        """Update existing recovery token"""
        pass
