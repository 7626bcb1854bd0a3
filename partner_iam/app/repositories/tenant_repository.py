from abc import ABC, abstractmethod

from partner_iam.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def exists(self, tenant_id: str) -> bool:
        """Whether a tenant with this id is registered"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        pass
