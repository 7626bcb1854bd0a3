"""
Per-session cache of resolved access.

Entries are keyed by session id and remember the identity they were computed
for, so a cached value is never served to another session or identity.
"""

import time
from typing import Dict, Optional, Tuple
from uuid import UUID

from partner_iam.domain.access import ResolvedAccess


class SessionAccessCache:
    def __init__(self, ttl_seconds: float = 300.0):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, Tuple[UUID, ResolvedAccess, float]] = {}
        self._last_sweep = time.monotonic()

    def get(self, session_id: str, identity_id: UUID) -> Optional[ResolvedAccess]:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        cached_identity_id, access, stored_at = entry
        if cached_identity_id != identity_id or self._expired(stored_at, time.monotonic()):
            # Session now belongs to another identity, or the entry is stale
            self._entries.pop(session_id, None)
            return None
        return access

    def put(self, session_id: str, identity_id: UUID, access: ResolvedAccess) -> None:
        now = time.monotonic()
        if now - self._last_sweep > self.ttl_seconds:
            self.sweep(now)
        self._entries[session_id] = (identity_id, access, now)

    def sweep(self, now: Optional[float] = None) -> int:
        """Evict expired entries of sessions that are never read again"""
        now = time.monotonic() if now is None else now
        self._last_sweep = now
        stale = [sid for sid, entry in self._entries.items() if self._expired(entry[2], now)]
        for session_id in stale:
            del self._entries[session_id]
        return len(stale)

    def invalidate_session(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def invalidate_identity(self, identity_id: UUID) -> int:
        """Drop every session entry of an identity (role or membership change)"""
        stale = [sid for sid, entry in self._entries.items() if entry[0] == identity_id]
        for session_id in stale:
            del self._entries[session_id]
        return len(stale)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
