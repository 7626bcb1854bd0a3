"""
Tenant Entity

A partner organization; the isolation boundary for partner data.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import generate_uuid, utcnow


class Tenant(SQLModel, table=True):
    """
    Tenant entity - a partner organization.

    Business Rules:
    - Partner memberships must point at a tenant
    - Data of one tenant is never visible to another tenant's partners
    """

    __tablename__ = "tenants"

    id: str = Field(default_factory=generate_uuid, primary_key=True, max_length=64)
    name: str = Field(max_length=255)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
