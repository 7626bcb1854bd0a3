from typing import Optional

from pydantic import BaseModel


class MembershipResponse(BaseModel):
    """Response for update membership use case"""

    id: str
    identity_id: str
    tenant_id: Optional[str] = None
    role: str
    disabled: bool
