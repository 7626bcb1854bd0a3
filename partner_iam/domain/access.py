"""
Resolved access values.

ResolvedAccess is derived per evaluation and never persisted.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from .entities.enums import AccessRole, MembershipRole

SUPERADMIN_LABELS = frozenset({MembershipRole.superadmin.value, MembershipRole.sef_admin.value})


class ResolvedAccess(BaseModel):
    """Effective role and tenant scope of a caller"""

    model_config = ConfigDict(frozen=True)

    role: AccessRole
    tenant_id: Optional[str] = None

    @classmethod
    def unknown(cls) -> "ResolvedAccess":
        return cls(role=AccessRole.unknown, tenant_id=None)

    @property
    def is_admin(self) -> bool:
        """admin or superadmin: full cross-tenant visibility"""
        return self.role in (AccessRole.superadmin, AccessRole.admin)

    @property
    def is_superadmin(self) -> bool:
        return self.role == AccessRole.superadmin


class RoleOverride(BaseModel):
    """
    Role/tenant substitution supplied outside the persistent session.

    Used both for the ephemeral selection (landing page, demo) and for the
    non-production test override.
    """

    model_config = ConfigDict(frozen=True)

    role: AccessRole
    tenant_id: Optional[str] = None


def normalize_stored_role(stored_role: Optional[str]) -> AccessRole:
    """
    Map a Membership.role label to an effective role.

    superadmin / sef_admin -> superadmin, admin -> admin, anything else -> partner.
    """
    label = stored_role or ""
    if label in SUPERADMIN_LABELS:
        return AccessRole.superadmin
    if label == MembershipRole.admin.value:
        return AccessRole.admin
    return AccessRole.partner
