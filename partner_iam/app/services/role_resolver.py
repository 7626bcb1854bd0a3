"""
Role Resolver

Single entry point for computing a caller's effective role and tenant scope.
All precedence rules live here.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from partner_iam.app.services.access_cache import SessionAccessCache
from partner_iam.app.services.allowlist import SuperadminAllowlist
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.access import ResolvedAccess, RoleOverride, normalize_stored_role
from partner_iam.domain.entities import AccessRole, Identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """Inputs of one resolution"""

    identity: Optional[Identity] = None
    selection: Optional[RoleOverride] = None
    test_override: Optional[RoleOverride] = None
    session_id: Optional[str] = None


class RoleResolver:
    """
    Resolves (role, tenant_id) for the current caller.

    Precedence, highest first:
    1. Ephemeral selection override, only when explicitly present
    2. Test override, only when the resolver runs in a non-production config
    3. Allowlist -> superadmin with no tenant, whatever the membership says
    4. Membership: missing or disabled -> unknown, else normalized stored role
       and the membership's tenant
    5. unknown

    Never raises for a missing membership and never writes anything.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        allowlist: SuperadminAllowlist,
        non_production: bool = False,
        cache: Optional[SessionAccessCache] = None,
    ):
        self.uow = uow
        self.allowlist = allowlist
        self.non_production = non_production
        self.cache = cache

    async def resolve(self, context: ResolutionContext) -> ResolvedAccess:
        if context.selection is not None:
            logger.debug("Access from ephemeral selection: %s", context.selection.role.value)
            return ResolvedAccess(
                role=context.selection.role, tenant_id=context.selection.tenant_id
            )

        if context.test_override is not None:
            if self.non_production:
                logger.debug("Access from test override: %s", context.test_override.role.value)
                return ResolvedAccess(
                    role=context.test_override.role, tenant_id=context.test_override.tenant_id
                )
            logger.warning("Test role override ignored in production configuration")

        identity = context.identity
        if identity is None:
            return ResolvedAccess.unknown()

        if self.cache is not None and context.session_id:
            cached = self.cache.get(context.session_id, identity.id)
            if cached is not None:
                return cached

        access = await self._resolve_authoritative(identity)

        if self.cache is not None and context.session_id:
            self.cache.put(context.session_id, identity.id, access)
        return access

    async def _resolve_authoritative(self, identity: Identity) -> ResolvedAccess:
        # Allowlist wins over any membership state, including disabled or missing
        if self.allowlist.contains(identity):
            logger.debug("Identity %s resolved as allowlisted superadmin", identity.id)
            return ResolvedAccess(role=AccessRole.superadmin, tenant_id=None)

        async with self.uow:
            membership = await self.uow.memberships.find_by_identity_id(identity.id)

            if membership is None:
                logger.debug("Identity %s has no membership", identity.id)
                return ResolvedAccess.unknown()

            if membership.disabled:
                logger.debug("Identity %s has a disabled membership", identity.id)
                return ResolvedAccess.unknown()

            role = normalize_stored_role(membership.role)
            logger.debug(
                "Identity %s resolved from membership: %s -> %s",
                identity.id,
                membership.role,
                role.value,
            )
            return ResolvedAccess(role=role, tenant_id=membership.tenant_id)
