from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.app.repositories.membership_repository import IMembershipRepository
from partner_iam.domain.entities import Membership


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, membership_id: UUID) -> Optional[Membership]:
        """Get membership by ID"""
        stmt = select(Membership).where(Membership.id == membership_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def find_by_identity_id(self, identity_id: UUID) -> Optional[Membership]:
        """Get the membership of an identity"""
        stmt = select(Membership).where(Membership.identity_id == identity_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def insert(self, membership: Membership) -> Membership:
        """Insert a new membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def update(self, membership: Membership) -> Membership:
        """Update existing membership"""
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership
