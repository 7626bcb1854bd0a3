from typing import List

from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.result import Result, Return
from .dtos import DeliverableInfo


class ListDeliverablesUseCase:
    """Lists deliverables visible to the caller; scoping happens in the repository."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, access: ResolvedAccess) -> Result[List[DeliverableInfo]]:
        async with self.uow:
            deliverables = await self.uow.deliverables.list_for_access(access)

        return Return.ok(
            [
                DeliverableInfo(
                    id=str(d.id),
                    tenant_id=d.tenant_id,
                    name=d.name,
                    status=d.status.value,
                )
                for d in deliverables
            ]
        )
