"""
Membership Entity

Binds an Identity to a tenant and a stored role.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class Membership(SQLModel, table=True):
    """
    Membership entity - binds an Identity to a tenant and a stored role.

    Business Rules:
    - One membership per identity (identity_id is unique)
    - tenant_id may be null only when the stored role is not "partner"
    - Disabled memberships resolve to no access
    - Disable instead of delete
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    identity_id: UUID = Field(foreign_key="identities.id", nullable=False, unique=True)
    tenant_id: Optional[str] = Field(
        default=None, foreign_key="tenants.id", index=True, max_length=64
    )

    # Free text on purpose, see MembershipRole
    role: str = Field(nullable=False, max_length=50)
    disabled: bool = Field(default=False)

    # Display fields
    email: str = Field(max_length=255)
    full_name: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_membership_disabled", "disabled"),)
