"""
Access Use Cases

Current access context and tenant-scoped reads.
"""

from .load_context_use_case import LoadContextUseCase
from .list_deliverables_use_case import ListDeliverablesUseCase
from .get_activity_use_case import GetActivityUseCase
from .dtos import (
    AccessInfo,
    ActivityEntryInfo,
    ActivityPage,
    ContextResponse,
    DeliverableInfo,
    IdentityInfo,
    MembershipInfo,
)

__all__ = [
    "LoadContextUseCase",
    "ListDeliverablesUseCase",
    "GetActivityUseCase",
    "AccessInfo",
    "ActivityEntryInfo",
    "ActivityPage",
    "ContextResponse",
    "DeliverableInfo",
    "IdentityInfo",
    "MembershipInfo",
]
