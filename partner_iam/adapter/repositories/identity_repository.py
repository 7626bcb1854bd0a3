from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.app.repositories.identity_repository import IIdentityRepository
from partner_iam.domain.entities import Identity


class IdentityRepository(IIdentityRepository):
    """Identity repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[Identity]:
        """Get identity by email address"""
        stmt = select(Identity).where(Identity.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, identity_id: UUID) -> Optional[Identity]:
        """Get identity by ID"""
        stmt = select(Identity).where(Identity.id == identity_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, identity: Identity) -> Identity:
        """Create a new identity"""
        self.session.add(identity)
        await self.session.flush()
        await self.session.refresh(identity)
        return identity

    async def update(self, identity: Identity) -> Identity:
        """Update existing identity"""
        self.session.add(identity)
        await self.session.flush()
        await self.session.refresh(identity)
        return identity

    async def delete(self, identity: Identity) -> None:
        """Delete an identity"""
        await self.session.delete(identity)
        await self.session.flush()
