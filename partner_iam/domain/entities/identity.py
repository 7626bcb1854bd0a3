"""
Identity Entity

An authenticated principal owned by the identity provider.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, JSON, SQLModel

from ..base import utcnow


class Identity(SQLModel, table=True):
    """
    Identity entity - an authenticated principal.

    Business Rules:
    - Email must be unique across all identities
    - id is immutable for the identity's lifetime
    - Deleted only as a provisioning compensation or explicit offboarding
    - Credential stored as bcrypt hash (cost factor 12)
    """

    __tablename__ = "identities"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)

    full_name: Optional[str] = Field(default=None, max_length=255)
    email_confirmed: bool = Field(default=False)
    identity_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
