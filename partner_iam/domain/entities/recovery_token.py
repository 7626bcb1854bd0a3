"""
RecoveryToken Entity

One-time credential-recovery tokens behind recovery links.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow


class RecoveryToken(SQLModel, table=True):
    """
    RecoveryToken entity - backs a credential-recovery link.

    Business Rules:
    - Token is SHA-256 hash of a secure random string
    - Single-use: marked as used after confirmation
    - Expires after RECOVERY_TOKEN_TTL_MINUTES
    """

    __tablename__ = "recovery_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    identity_id: UUID = Field(foreign_key="identities.id", index=True)
    token_hash: str = Field(max_length=64)

    used: bool = Field(default=False)

    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_recovery_token_hash", "token_hash"),)
