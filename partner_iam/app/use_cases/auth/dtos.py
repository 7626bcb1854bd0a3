"""
Authentication Use Case DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel


class LoginResponse(BaseModel):
    """Response for login use case"""

    access_token: str
    token_type: str = "bearer"
    identity_id: str


class ConfirmRecoveryResponse(BaseModel):
    """Response for confirm recovery use case"""

    status: str
    message: str
