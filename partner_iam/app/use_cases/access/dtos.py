"""
Access Use Case DTOs (Data Transfer Objects)
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class IdentityInfo(BaseModel):
    """Identity details in context response"""

    id: str
    email: str
    full_name: Optional[str] = None


class AccessInfo(BaseModel):
    """Resolved access in context response"""

    role: str
    tenant_id: Optional[str] = None


class MembershipInfo(BaseModel):
    """Stored membership in context response"""

    id: str
    role: str
    tenant_id: Optional[str] = None
    disabled: bool


class ContextResponse(BaseModel):
    """Response for load context use case"""

    identity: IdentityInfo
    access: AccessInfo
    membership: Optional[MembershipInfo] = None


class DeliverableInfo(BaseModel):
    id: str
    tenant_id: str
    name: str
    status: str


class ActivityEntryInfo(BaseModel):
    activity_type: str
    actor_email: Optional[str] = None
    target_email: Optional[str] = None
    tenant_id: Optional[str] = None
    description: str
    timestamp: str
    metadata: Dict[str, Any]


class ActivityPage(BaseModel):
    entries: List[ActivityEntryInfo]
    next_cursor: Optional[str] = None
