import base64
from datetime import datetime
from typing import List, Optional, Tuple

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from partner_iam.app.repositories.activity_log_repository import IActivityLogRepository
from partner_iam.app.services.tenant_filter_guard import TenantFilterGuard
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import ActivityLogEntry


class ActivityLogRepository(IActivityLogRepository):
    """ActivityLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession, guard: Optional[TenantFilterGuard] = None):
        self.session = session
        self.guard = guard or TenantFilterGuard()

    async def append(self, entry: ActivityLogEntry) -> ActivityLogEntry:
        """Append an entry (write-once)"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def list_for_access(
        self, access: ResolvedAccess, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[ActivityLogEntry], Optional[str]]:
        """
        List entries visible to the caller, newest first.

        Cursor format: base64-encoded ISO timestamp of created_at
        """
        stmt = select(ActivityLogEntry)

        if cursor:
            try:
                cursor_timestamp_str = base64.b64decode(cursor).decode("utf-8")
                cursor_timestamp = datetime.fromisoformat(cursor_timestamp_str)
                stmt = stmt.where(ActivityLogEntry.created_at < cursor_timestamp)
            except (ValueError, TypeError):
                # Invalid cursor, ignore and return from beginning
                pass

        stmt = self.guard.apply(stmt, access)
        stmt = stmt.order_by(ActivityLogEntry.created_at.desc()).limit(limit + 1)

        result = await self.session.exec(stmt)
        entries = list(result.all())

        has_more = len(entries) > limit
        if has_more:
            entries = entries[:limit]

        next_cursor = None
        if has_more and entries:
            cursor_timestamp_str = entries[-1].created_at.isoformat()
            next_cursor = base64.b64encode(cursor_timestamp_str.encode("utf-8")).decode("utf-8")

        return entries, next_cursor
