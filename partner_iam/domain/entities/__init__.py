"""
Partner IAM Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AccessRole,
    DeliverableStatus,
    MembershipRole,
    SagaState,
)

# Export all entities
from .identity import Identity
from .tenant import Tenant
from .membership import Membership
from .activity_log_entry import ActivityLogEntry
from .recovery_token import RecoveryToken
from .deliverable import Deliverable

__all__ = [
    # Enums
    "AccessRole",
    "DeliverableStatus",
    "MembershipRole",
    "SagaState",
    # Entities
    "Identity",
    "Tenant",
    "Membership",
    "ActivityLogEntry",
    "RecoveryToken",
    "Deliverable",
]
