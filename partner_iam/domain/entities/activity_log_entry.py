"""
ActivityLogEntry Entity

Append-only record of administrative actions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from ..base import utcnow


class ActivityLogEntry(SQLModel, table=True):
    """
    ActivityLogEntry entity - who did what, when, to whom.

    Business Rules:
    - Write-once (never updated or deleted)
    - tenant_id is the tenant the action targeted, null for global actions
    """

    __tablename__ = "activity_log"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    activity_type: str = Field(max_length=100)  # e.g. "user_created"
    actor_id: Optional[UUID] = Field(default=None, index=True)
    actor_email: Optional[str] = Field(default=None, max_length=255)
    target_email: Optional[str] = Field(default=None, max_length=255)
    tenant_id: Optional[str] = Field(default=None, index=True, max_length=64)

    description: str = Field(default="", max_length=500)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_activity_created_at", "created_at"),
        Index("idx_activity_tenant_type", "tenant_id", "activity_type"),
    )
