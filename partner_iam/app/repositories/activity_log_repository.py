from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import ActivityLogEntry


class IActivityLogRepository(ABC):
    """ActivityLog repository interface - application layer"""

    @abstractmethod
    async def append(self, entry: ActivityLogEntry) -> ActivityLogEntry:
        """Append an entry (write-once)"""
        pass

    @abstractmethod
    async def list_for_access(
        self, access: ResolvedAccess, limit: int = 50, cursor: Optional[str] = None
    ) -> Tuple[List[ActivityLogEntry], Optional[str]]:
        """
        List entries visible to the caller with cursor-based pagination.

        Returns:
            Tuple of (entries list, next_cursor)
            - entries: newest first, already tenant-scoped for the caller
            - next_cursor: Cursor for next page, None if no more entries
        """
        pass
