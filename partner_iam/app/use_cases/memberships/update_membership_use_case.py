"""
Update Membership Use Case

Role changes and disabling of memberships by administrators.
"""

import logging
from typing import Optional
from uuid import UUID

from partner_iam.app.services.access_cache import SessionAccessCache
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.access import ResolvedAccess, normalize_stored_role
from partner_iam.domain.entities import AccessRole, ActivityLogEntry, Identity, MembershipRole
from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error, Result, Return
from .dtos import MembershipResponse

logger = logging.getLogger(__name__)

PRIVILEGED_ROLES = (AccessRole.superadmin, AccessRole.admin)


class UpdateMembershipUseCase:
    """
    Use case for changing a membership's stored role or disabled flag.

    Business Rules:
    - Requester must resolve to admin or superadmin
    - Only a superadmin may touch a privileged (admin/superadmin) membership
      or grant a privileged role
    - Stored role must be a known label
    - Role "partner" requires the membership to have a tenant
    - Records an activity log entry in the same transaction
    - Cached access of the affected identity is invalidated
    """

    def __init__(self, uow: UnitOfWork, access_cache: Optional[SessionAccessCache] = None):
        self.uow = uow
        self.access_cache = access_cache

    async def execute(
        self,
        requester_access: ResolvedAccess,
        membership_id: UUID,
        role: Optional[str] = None,
        disabled: Optional[bool] = None,
        requester: Optional[Identity] = None,
    ) -> Result[MembershipResponse]:
        if not requester_access.is_admin:
            return Return.err(Error(ErrorKind.authorization.value, "Admin access required"))

        if role is None and disabled is None:
            return Return.err(Error(ErrorKind.validation.value, "Nothing to update"))

        if role is not None:
            try:
                new_role = MembershipRole(role)
            except ValueError:
                return Return.err(
                    Error(
                        ErrorKind.validation.value,
                        f"Invalid role: {role}. Must be one of: "
                        + ", ".join(r.value for r in MembershipRole),
                    )
                )
            if (
                normalize_stored_role(new_role.value) in PRIVILEGED_ROLES
                and not requester_access.is_superadmin
            ):
                return Return.err(
                    Error(
                        ErrorKind.authorization.value,
                        "Only superadmins can grant admin roles",
                    )
                )

        async with self.uow:
            membership = await self.uow.memberships.get_by_id(membership_id)
            if membership is None:
                return Return.err(Error(ErrorKind.not_found.value, "Membership not found"))

            if (
                normalize_stored_role(membership.role) in PRIVILEGED_ROLES
                and not requester_access.is_superadmin
            ):
                return Return.err(
                    Error(
                        ErrorKind.authorization.value,
                        "Only superadmins can modify admin memberships",
                    )
                )

            if role is not None and new_role == MembershipRole.partner and membership.tenant_id is None:
                return Return.err(
                    Error(
                        ErrorKind.validation.value,
                        "Partner memberships require a tenant",
                    )
                )

            changes = {}
            if role is not None and membership.role != new_role.value:
                changes["role"] = {"old": membership.role, "new": new_role.value}
                membership.role = new_role.value
            if disabled is not None and membership.disabled != disabled:
                changes["disabled"] = {"old": membership.disabled, "new": disabled}
                membership.disabled = disabled

            if changes:
                await self.uow.memberships.update(membership)
                await self.uow.activity_log.append(
                    ActivityLogEntry(
                        activity_type="membership_updated",
                        actor_id=requester.id if requester else None,
                        actor_email=requester.email if requester else None,
                        target_email=membership.email,
                        tenant_id=membership.tenant_id,
                        description=f"Updated membership of {membership.email}",
                        event_metadata={
                            "membership_id": str(membership.id),
                            "identity_id": str(membership.identity_id),
                            "changes": changes,
                        },
                    )
                )
                await self.uow.commit()

                if self.access_cache is not None:
                    dropped = self.access_cache.invalidate_identity(membership.identity_id)
                    logger.info(
                        "Membership %s updated, %d cached session(s) invalidated",
                        membership.id,
                        dropped,
                    )

            return Return.ok(
                MembershipResponse(
                    id=str(membership.id),
                    identity_id=str(membership.identity_id),
                    tenant_id=membership.tenant_id,
                    role=membership.role,
                    disabled=membership.disabled,
                )
            )
