from abc import ABC, abstractmethod
from typing import List

from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import Deliverable


class IDeliverableRepository(ABC):
    """Deliverable repository interface - application layer"""

    @abstractmethod
    async def create(self, deliverable: Deliverable) -> Deliverable:
        """Create a new deliverable"""
        pass

    @abstractmethod
    async def list_for_access(self, access: ResolvedAccess) -> List[Deliverable]:
        """List deliverables visible to the caller (tenant-scoped)"""
        pass
