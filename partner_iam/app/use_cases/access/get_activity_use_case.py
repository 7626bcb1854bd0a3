"""
Get Activity Use Case

Retrieves activity log entries visible to the caller with pagination.
"""

from typing import Optional

from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.result import Result, Return
from .dtos import ActivityEntryInfo, ActivityPage


class GetActivityUseCase:
    """
    Use case for reading the activity log.

    Business Rules:
    - admin / superadmin see every entry
    - partners see entries of their own tenant only
    - unknown access sees nothing
    - Results ordered by newest first, cursor-based pagination
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, access: ResolvedAccess, limit: int = 50, cursor: Optional[str] = None
    ) -> Result[ActivityPage]:
        async with self.uow:
            entries, next_cursor = await self.uow.activity_log.list_for_access(
                access, limit=limit, cursor=cursor
            )

        return Return.ok(
            ActivityPage(
                entries=[
                    ActivityEntryInfo(
                        activity_type=entry.activity_type,
                        actor_email=entry.actor_email,
                        target_email=entry.target_email,
                        tenant_id=entry.tenant_id,
                        description=entry.description,
                        timestamp=entry.created_at.isoformat() + "Z",
                        metadata=entry.event_metadata or {},
                    )
                    for entry in entries
                ],
                next_cursor=next_cursor,
            )
        )
