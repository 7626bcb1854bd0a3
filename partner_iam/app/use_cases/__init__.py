"""
Use Cases

Organized into domain folders:
- provisioning/: Account provisioning saga
- auth/: Session login and credential recovery
- access/: Current access context and tenant-scoped reads
- memberships/: Membership administration
"""

from .provisioning import (
    ProvisionAccountUseCase,
    ProvisionAccountCommand,
    ProvisionAccountResponse,
)
from .auth import (
    LoginUseCase,
    ConfirmRecoveryUseCase,
)
from .access import (
    LoadContextUseCase,
    ListDeliverablesUseCase,
    GetActivityUseCase,
)
from .memberships import (
    UpdateMembershipUseCase,
)

__all__ = [
    # Provisioning
    "ProvisionAccountUseCase",
    "ProvisionAccountCommand",
    "ProvisionAccountResponse",
    # Auth
    "LoginUseCase",
    "ConfirmRecoveryUseCase",
    # Access
    "LoadContextUseCase",
    "ListDeliverablesUseCase",
    "GetActivityUseCase",
    # Memberships
    "UpdateMembershipUseCase",
]
