from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.app.repositories.deliverable_repository import IDeliverableRepository
from partner_iam.app.services.tenant_filter_guard import TenantFilterGuard
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import Deliverable


class DeliverableRepository(IDeliverableRepository):
    """Deliverable repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, guard: Optional[TenantFilterGuard] = None):
        self.session = session
        self.guard = guard or TenantFilterGuard()

    async def create(self, deliverable: Deliverable) -> Deliverable:
        """Create a new deliverable"""
        self.session.add(deliverable)
        await self.session.flush()
        await self.session.refresh(deliverable)
        return deliverable

    async def list_for_access(self, access: ResolvedAccess) -> List[Deliverable]:
        """List deliverables visible to the caller"""
        stmt = self.guard.apply(select(Deliverable), access)
        stmt = stmt.order_by(Deliverable.created_at, Deliverable.name)
        result = await self.session.exec(stmt)
        return list(result.all())
