"""
Provisioning Use Case DTOs (Data Transfer Objects)

Command/Response pattern for the account-provisioning saga.
"""

from typing import List, Optional

from pydantic import BaseModel


class ProvisionAccountCommand(BaseModel):
    """
    Provisioning command - validated intent to create an identity + membership

    Created by API layer from the HTTP payload.
    """

    email: str
    full_name: str
    role: str
    tenant_id: Optional[str] = None


class ProvisionAccountResponse(BaseModel):
    """Provisioning result - identity and membership created"""

    success: bool = True
    identity_id: str
    membership_id: str
    recovery_link: Optional[str] = None
    outcome: str
    states: List[str]
