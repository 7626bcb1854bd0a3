from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.app.repositories.recovery_token_repository import IRecoveryTokenRepository
from partner_iam.domain.entities import RecoveryToken


class RecoveryTokenRepository(IRecoveryTokenRepository):
    """RecoveryToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RecoveryToken) -> RecoveryToken:
        """Create a new recovery token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[RecoveryToken]:
        """Get recovery token by token hash"""
        stmt = select(RecoveryToken).where(RecoveryToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, token: RecoveryToken) -> RecoveryToken:
        """Update existing recovery token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token
