"""
Provisioning Use Cases

Account creation with compensating rollback.
"""

from .provision_account_use_case import ProvisionAccountUseCase
from .dtos import ProvisionAccountCommand, ProvisionAccountResponse

__all__ = [
    "ProvisionAccountUseCase",
    "ProvisionAccountCommand",
    "ProvisionAccountResponse",
]
