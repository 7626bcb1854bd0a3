"""
Membership Administration Use Cases
"""

from .update_membership_use_case import UpdateMembershipUseCase
from .dtos import MembershipResponse

__all__ = [
    "UpdateMembershipUseCase",
    "MembershipResponse",
]
