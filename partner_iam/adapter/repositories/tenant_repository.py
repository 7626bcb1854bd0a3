from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.app.repositories.tenant_repository import ITenantRepository
from partner_iam.domain.entities import Tenant


class TenantRepository(ITenantRepository):
    """Tenant lookups; tenants are registered out of band"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, tenant_id: str) -> bool:
        result = await self.session.exec(select(Tenant.id).where(Tenant.id == tenant_id))
        return result.first() is not None

    async def create(self, tenant: Tenant) -> Tenant:
        self.session.add(tenant)
        await self.session.flush()
        return tenant
