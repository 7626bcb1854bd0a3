"""
Deliverable Entity

Tenant-scoped partner deliverable.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow
from .enums import DeliverableStatus


class Deliverable(SQLModel, table=True):
    __tablename__ = "deliverables"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", nullable=False, index=True, max_length=64)

    name: str = Field(max_length=255)
    status: DeliverableStatus = Field(default=DeliverableStatus.pending)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
